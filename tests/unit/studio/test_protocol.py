"""
Unit tests for the correlation protocol: ids, encoding, reply decoding.
"""

import json
import uuid

import pytest
from pydantic import ValidationError

from studiobridge.studio import protocol
from studiobridge.studio.models import CommandKind, Outcome, OutcomeKind


class TestRequestIds:
    def test_id_is_canonical_uuid4(self):
        request_id = protocol.new_request_id()
        parsed = uuid.UUID(request_id)
        assert parsed.version == 4
        assert str(parsed) == request_id

    def test_ids_do_not_repeat(self):
        ids = {protocol.new_request_id() for _ in range(1000)}
        assert len(ids) == 1000


class TestCommandBuilding:
    def test_execute_code_command(self):
        command = protocol.execute_code_command("print(1)")
        assert command.kind is CommandKind.EXECUTE_CODE
        assert command.arguments == {"command": "print(1)"}
        uuid.UUID(command.id)

    def test_insert_asset_command_keeps_given_id(self):
        command = protocol.insert_asset_command("crate", command_id="fixed-id")
        assert command.id == "fixed-id"
        assert command.kind is CommandKind.INSERT_ASSET
        assert command.arguments == {"query": "crate"}

    def test_command_is_immutable(self):
        command = protocol.execute_code_command("print(1)")
        with pytest.raises(ValidationError):
            command.id = "other"


class TestEncode:
    def test_execute_code_wire_shape(self):
        command = protocol.execute_code_command("print(1)", command_id="abc")
        assert json.loads(protocol.encode(command)) == {
            "id": "abc",
            "args": {"RunCode": {"command": "print(1)"}},
        }

    def test_insert_asset_wire_shape(self):
        command = protocol.insert_asset_command("wooden crate", command_id="abc")
        assert json.loads(protocol.encode(command)) == {
            "id": "abc",
            "args": {"InsertModel": {"query": "wooden crate"}},
        }


class TestDecode:
    def test_extracts_response_field(self):
        outcome = protocol.decode(Outcome.ready({"response": "Hello"}), "abc")
        assert outcome.kind is OutcomeKind.READY
        assert outcome.payload == "Hello"

    def test_matching_id_is_accepted(self):
        outcome = protocol.decode(Outcome.ready({"id": "abc", "response": "5"}), "abc")
        assert outcome.payload == "5"

    def test_mismatched_id_is_ignored(self):
        outcome = protocol.decode(Outcome.ready({"id": "other", "response": "5"}), "abc")
        assert outcome.kind is OutcomeKind.NOT_READY_YET
        assert "other" in outcome.detail

    def test_body_without_response_falls_back_to_raw_json(self):
        outcome = protocol.decode(Outcome.ready({"status": "done"}), "abc")
        assert outcome.kind is OutcomeKind.READY
        assert json.loads(outcome.payload) == {"status": "done"}

    def test_non_string_response_serialized(self):
        outcome = protocol.decode(Outcome.ready({"response": {"name": "Crate"}}), "abc")
        assert json.loads(outcome.payload) == {"name": "Crate"}

    def test_empty_body_becomes_null(self):
        outcome = protocol.decode(Outcome.ready(None), "abc")
        assert outcome.payload == "null"

    def test_null_response_is_still_a_string(self):
        outcome = protocol.decode(Outcome.ready({"response": None}), "abc")
        assert outcome.kind is OutcomeKind.READY
        assert outcome.payload == "null"

    @pytest.mark.parametrize(
        "outcome",
        [
            Outcome.not_ready("HTTP 204"),
            Outcome.timeout("slow"),
            Outcome.refused("refused"),
            Outcome.protocol_error("HTTP 500: x", status_code=500),
        ],
    )
    def test_non_ready_passes_through(self, outcome):
        assert protocol.decode(outcome, "abc") is outcome

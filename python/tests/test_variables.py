"""Tests for variable extraction (inline block and local variables endpoint)."""

import httpx
import pytest
import respx

from figtokens.errors import VariablesUnauthorizedError, VariablesUnavailableError
from figtokens.services.figma_client import FigmaClient
from figtokens.services.variables import (
    fetch_variables,
    inline_variable_entries,
    map_local_variables,
)
from tests.factories import TEST_CREDENTIAL, local_variables_response, variable

FILE_KEY = "AbC123"
VARIABLES_PATH = f"/files/{FILE_KEY}/variables/local"


class TestInlineVariableEntries:
    def test_maps_each_variable_as_is(self):
        raw = variable("color/primary", "C1")

        entries = inline_variable_entries({"V1": raw, "V2": {"resolvedType": "float"}})

        assert [entry.token_id for entry in entries] == ["V1", "V2"]
        assert entries[0].category == "VARIABLE_COLOR"
        assert entries[0].raw_payload == raw
        assert entries[1].name == "Unnamed Variable"
        assert entries[1].category == "VARIABLE_FLOAT"

    def test_missing_block_yields_nothing(self):
        assert inline_variable_entries(None) == []
        assert inline_variable_entries([]) == []


class TestMapLocalVariables:
    """Tests for map_local_variables()."""

    def test_groups_by_collection_in_collection_order(self):
        collections = {"C2": {"name": "Spacing"}, "C1": {"name": "Colors"}}
        variables = {
            "V1": variable("primary", "C1"),
            "V2": variable("sm", "C2", resolved_type="FLOAT", values_by_mode={"1:0": 4}),
            "V3": variable("secondary", "C1"),
        }

        entries = map_local_variables(collections, variables)

        assert [entry.token_id for entry in entries] == ["V2", "V1", "V3"]
        assert entries[0].raw_payload == {
            "collection": "Spacing",
            "resolvedType": "FLOAT",
            "valuesByMode": {"1:0": 4},
            "scopes": [],
            "hiddenFromPublishing": False,
        }

    def test_unknown_collection_is_skipped(self):
        entries = map_local_variables(
            {"C1": {"name": "Colors"}},
            {"V1": variable("primary", "C1"), "V2": variable("orphan", "C9")},
        )

        assert [entry.token_id for entry in entries] == ["V1"]

    def test_non_string_collection_id_is_skipped(self):
        entries = map_local_variables(
            {"C1": {"name": "Colors"}},
            {
                "V1": {**variable("primary", "C1"), "variableCollectionId": ["C1"]},
                "V2": {**variable("secondary", "C1"), "variableCollectionId": {"id": "C1"}},
                "V3": variable("tertiary", "C1"),
            },
        )

        assert [entry.token_id for entry in entries] == ["V3"]


class TestFetchVariables:
    """Tests for fetch_variables() error mapping."""

    def test_success(self, figma_mock: respx.MockRouter, figma_client: FigmaClient):
        figma_mock.get(VARIABLES_PATH).respond(
            json=local_variables_response(
                {"C1": {"name": "Colors"}}, {"V1": variable("primary", "C1")}
            )
        )

        entries = fetch_variables(figma_client, FILE_KEY, TEST_CREDENTIAL)

        assert [entry.name for entry in entries] == ["primary"]
        assert entries[0].raw_payload["collection"] == "Colors"

    def test_403_is_unauthorized(self, figma_mock: respx.MockRouter, figma_client: FigmaClient):
        figma_mock.get(VARIABLES_PATH).respond(status_code=403, json={"err": "Forbidden"})

        with pytest.raises(VariablesUnauthorizedError):
            fetch_variables(figma_client, FILE_KEY, TEST_CREDENTIAL)

    def test_other_status_is_unavailable(
        self, figma_mock: respx.MockRouter, figma_client: FigmaClient
    ):
        figma_mock.get(VARIABLES_PATH).respond(status_code=404, json={"err": "Not found"})

        with pytest.raises(VariablesUnavailableError) as exc_info:
            fetch_variables(figma_client, FILE_KEY, TEST_CREDENTIAL)

        assert exc_info.value.message == "Variables API returned HTTP 404"

    def test_transport_failure_is_unavailable(
        self, figma_mock: respx.MockRouter, figma_client: FigmaClient
    ):
        figma_mock.get(VARIABLES_PATH).mock(side_effect=httpx.ReadTimeout("slow"))

        with pytest.raises(VariablesUnavailableError, match="timed out"):
            fetch_variables(figma_client, FILE_KEY, TEST_CREDENTIAL)

    @pytest.mark.parametrize(
        ("body", "message"),
        [
            ({"status": 200}, "Variables API response missing 'meta' field."),
            (local_variables_response({}, {}), "No variable collections found."),
            (local_variables_response({"C1": {"name": "Colors"}}, {}), "No variables found."),
        ],
    )
    def test_empty_response_is_unavailable(
        self,
        figma_mock: respx.MockRouter,
        figma_client: FigmaClient,
        body: dict,
        message: str,
    ):
        figma_mock.get(VARIABLES_PATH).respond(json=body)

        with pytest.raises(VariablesUnavailableError) as exc_info:
            fetch_variables(figma_client, FILE_KEY, TEST_CREDENTIAL)

        assert exc_info.value.message == message

"""Tests for style enrichment and the direct style-node fallback.

Tests cover:
- Styles valued by the tree walk need no extra request
- Fallback fetches at most fetch_limit ids in one batched request
- Fallback failures are returned, never raised
- Unvalued styles still produce entries
"""

import httpx
import respx

from figtokens.services.figma_client import FigmaClient
from figtokens.services.style_enricher import (
    EnrichmentError,
    StyleNodeBatch,
    build_style_definitions,
    enrich_styles,
    fetch_style_nodes,
)
from tests.factories import (
    BODY_TEXT,
    RED,
    TEST_CREDENTIAL,
    node,
    nodes_response,
    solid_fill,
    style_meta,
)

FILE_KEY = "AbC123"
NODES_PATH = f"/files/{FILE_KEY}/nodes"


class TestBuildStyleDefinitions:
    def test_builds_one_definition_per_style(self):
        definitions = build_style_definitions(
            {"S1": style_meta("Red", "FILL"), "S2": {"styleType": "TEXT"}}
        )

        assert list(definitions) == ["S1", "S2"]
        assert definitions["S1"].category == "STYLE_FILL"
        assert definitions["S2"].name == "Unnamed Style"

    def test_missing_block_yields_nothing(self):
        assert build_style_definitions(None) == {}


class TestEnrichStyles:
    """Tests for enrich_styles()."""

    def test_tree_values_skip_fallback(
        self, figma_mock: respx.MockRouter, figma_client: FigmaClient
    ):
        route = figma_mock.get(NODES_PATH)
        document = node("0:0", children=[node("1:1", styles={"fill": "S1"}, fills=solid_fill(RED))])

        result = enrich_styles(
            figma_client, FILE_KEY, {"S1": style_meta("Red", "FILL")}, document, TEST_CREDENTIAL
        )

        assert not route.called
        assert result.valued_count == 1
        assert result.fallback_attempted is False
        assert result.entries[0].raw_payload["color"] == RED

    def test_stroke_values_from_tree_skip_fallback(
        self, figma_mock: respx.MockRouter, figma_client: FigmaClient
    ):
        route = figma_mock.get(NODES_PATH)
        strokes = solid_fill(RED)
        document = node("0:0", children=[node("1:1", styles={"stroke": "S1"}, strokes=strokes)])

        result = enrich_styles(
            figma_client,
            FILE_KEY,
            {"S1": style_meta("Outline", "STROKE")},
            document,
            TEST_CREDENTIAL,
        )

        assert not route.called
        assert result.valued_count == 1
        assert result.fallback_attempted is False
        assert result.entries[0].raw_payload["strokes"] == strokes

    def test_no_styles_makes_no_request(
        self, figma_mock: respx.MockRouter, figma_client: FigmaClient
    ):
        route = figma_mock.get(NODES_PATH)

        result = enrich_styles(figma_client, FILE_KEY, {}, node("0:0"), TEST_CREDENTIAL)

        assert not route.called
        assert result.entries == []

    def test_fallback_requests_first_ids_up_to_limit(
        self, figma_mock: respx.MockRouter, figma_client: FigmaClient
    ):
        styles = {f"S{i}": style_meta(f"Color {i}", "FILL") for i in range(25)}
        route = figma_mock.get(NODES_PATH).respond(
            json=nodes_response({"S0": node("S0", fills=solid_fill(RED))})
        )

        result = enrich_styles(
            figma_client, FILE_KEY, styles, node("0:0"), TEST_CREDENTIAL, fetch_limit=10
        )

        assert route.call_count == 1
        requested = route.calls.last.request.url.params["ids"].split(",")
        assert requested == [f"S{i}" for i in range(10)]
        assert result.fallback_style_ids == requested
        assert result.valued_count == 1
        assert len(result.entries) == 25

    def test_fallback_reads_node_by_definition_type(
        self, figma_mock: respx.MockRouter, figma_client: FigmaClient
    ):
        figma_mock.get(NODES_PATH).respond(
            json=nodes_response({"S1": node("S1", style=BODY_TEXT), "S2": None})
        )
        styles = {"S1": style_meta("Body", "TEXT"), "S2": style_meta("Missing", "FILL")}

        result = enrich_styles(figma_client, FILE_KEY, styles, node("0:0"), TEST_CREDENTIAL)

        payloads = {entry.token_id: entry.raw_payload for entry in result.entries}
        assert payloads["S1"]["textStyle"] == BODY_TEXT
        assert "fills" not in payloads["S2"]
        assert result.fallback_error is None

    def test_fallback_failure_is_returned_not_raised(
        self, figma_mock: respx.MockRouter, figma_client: FigmaClient
    ):
        figma_mock.get(NODES_PATH).respond(status_code=500, json={"err": "boom"})

        result = enrich_styles(
            figma_client,
            FILE_KEY,
            {"S1": style_meta("Red", "FILL")},
            node("0:0"),
            TEST_CREDENTIAL,
        )

        assert result.fallback_error is not None
        assert result.fallback_error.status_code == 500
        assert result.valued_count == 0
        assert [entry.token_id for entry in result.entries] == ["S1"]
        assert result.entries[0].raw_payload == style_meta("Red", "FILL")


class TestFetchStyleNodes:
    """Tests for fetch_style_nodes()."""

    def test_sends_credential_header(
        self, figma_mock: respx.MockRouter, figma_client: FigmaClient
    ):
        route = figma_mock.get(NODES_PATH).respond(json=nodes_response({}))

        fetch_style_nodes(figma_client, FILE_KEY, ["S1"], TEST_CREDENTIAL)

        assert route.calls.last.request.headers["X-Figma-Token"] == TEST_CREDENTIAL

    def test_missing_nodes_field_is_an_error(
        self, figma_mock: respx.MockRouter, figma_client: FigmaClient
    ):
        figma_mock.get(NODES_PATH).respond(json={"name": "x"})

        result = fetch_style_nodes(figma_client, FILE_KEY, ["S1"], TEST_CREDENTIAL)

        assert isinstance(result, EnrichmentError)
        assert result.style_ids == ["S1"]

    def test_network_failure_is_an_error(
        self, figma_mock: respx.MockRouter, figma_client: FigmaClient
    ):
        figma_mock.get(NODES_PATH).mock(side_effect=httpx.ConnectError("refused"))

        result = fetch_style_nodes(figma_client, FILE_KEY, ["S1"], TEST_CREDENTIAL)

        assert isinstance(result, EnrichmentError)
        assert result.status_code is None

    def test_unresolved_ids_are_dropped(
        self, figma_mock: respx.MockRouter, figma_client: FigmaClient
    ):
        figma_mock.get(NODES_PATH).respond(
            json=nodes_response({"S1": node("S1"), "S2": None})
        )

        result = fetch_style_nodes(figma_client, FILE_KEY, ["S1", "S2"], TEST_CREDENTIAL)

        assert isinstance(result, StyleNodeBatch)
        assert list(result.nodes) == ["S1"]

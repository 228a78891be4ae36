"""Tests for the page-extraction client and its stream parser."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from gamescout.config import EXTRACTION_PROMPT
from gamescout.core.errors import NoDataError, UnparsableStreamError, UpstreamTransportError
from gamescout.core.scoring import compute_insight
from gamescout.enrichment.extraction import (
    YellowcakeExtractor,
    normalize_extracted_game,
    parse_event_stream,
    unwrap_payload,
)


class TestParseEventStream:
    """Tests for server-sent event parsing."""

    def test_last_frame_wins(self) -> None:
        """Test the final well-formed frame is returned."""
        body = 'event: progress\ndata: {"step": 1}\n\ndata: {"step": 2}\n\n'
        assert parse_event_stream(body) == {"step": 2}

    def test_truncated_last_frame_falls_back(self) -> None:
        """Test a malformed final frame recovers the one before it."""
        body = 'data: {"step": 1}\ndata: {"data": [{"game_title": "Portal 2"}]}\ndata: {"data": [{"game_ti'
        assert parse_event_stream(body) == {"data": [{"game_title": "Portal 2"}]}

    def test_ignores_non_data_lines(self) -> None:
        """Test comments and event names are skipped."""
        body = ': keep-alive\nevent: done\nid: 3\ndata: {"ok": true}\n'
        assert parse_event_stream(body) == {"ok": True}

    def test_handles_crlf_and_missing_space(self) -> None:
        """Test CRLF line endings and `data:` without a trailing space."""
        assert parse_event_stream('data:{"a": 1}\r\n\r\n') == {"a": 1}

    @pytest.mark.parametrize("body", ["", "event: ping\n", "data: {broken\ndata: also broken\n"])
    def test_nothing_decodable_raises(self, body) -> None:
        """Test streams without a decodable frame raise."""
        with pytest.raises(UnparsableStreamError):
            parse_event_stream(body)


class TestUnwrapPayload:
    """Tests for locating game fields in a decoded payload."""

    def test_data_list(self) -> None:
        """Test `.data[0]` is preferred."""
        assert unwrap_payload({"data": [{"a": 1}, {"a": 2}]}) == {"a": 1}

    def test_data_object(self) -> None:
        """Test `.data` is used when it is not a list."""
        assert unwrap_payload({"data": {"a": 1}}) == {"a": 1}

    def test_root(self) -> None:
        """Test the payload itself is the last resort."""
        assert unwrap_payload({"game_title": "X"}) == {"game_title": "X"}

    def test_null_data_falls_back_to_root(self) -> None:
        """Test a null `.data` does not hide the root."""
        payload = {"data": None, "game_title": "X"}
        assert unwrap_payload(payload) is payload


class TestNormalizeExtractedGame:
    """Tests for coercing extracted fields."""

    def test_full_record(self) -> None:
        """Test typical extractor output."""
        game = normalize_extracted_game({
            "game_title": "Portal 2",
            "current_price": "$9.99",
            "original_price": "CDN$ 19.99",
            "discount_percent": "50%",
            "release_date": "Apr 18, 2011",
            "tags": ["Puzzle", " Co-op ", ""],
            "review_summary": "Overwhelmingly Positive",
        })
        assert game.title == "Portal 2"
        assert game.current_price == pytest.approx(9.99)
        assert game.original_price == pytest.approx(19.99)
        assert game.discount_percent == 50
        assert game.tags == ("Puzzle", "Co-op")
        assert game.review_summary == "Overwhelmingly Positive"

    def test_free_and_comma_tags(self) -> None:
        """Test 'Free' prices and comma-separated tags."""
        game = normalize_extracted_game({"title": "Dota 2", "current_price": "Free", "tags": "MOBA, Strategy"})
        assert game.current_price == 0
        assert game.discount_percent is None
        assert game.tags == ("MOBA", "Strategy")

    def test_thousands_separator(self) -> None:
        """Test prices with thousands separators."""
        assert normalize_extracted_game({"current_price": "1,299.50"}).current_price == pytest.approx(1299.5)

    def test_storefront_discount_label_loses_sign(self) -> None:
        """Test a "-50%" label reads as a 50% discount and scores as a great deal."""
        game = normalize_extracted_game({"current_price": "$9.99", "discount_percent": "-50%"})
        assert game.discount_percent == 50
        insight = compute_insight(game)
        assert insight.score == 88
        assert insight.action == "Buy now (if you want it)"

    def test_numeric_discount_is_not_clamped(self) -> None:
        """Test numeric discounts pass through with their sign."""
        assert normalize_extracted_game({"discount_percent": -20}).discount_percent == -20

    def test_missing_fields_stay_unknown(self) -> None:
        """Test absent fields are None, not zero."""
        game = normalize_extracted_game({"game_title": "Mystery"})
        assert game.current_price is None
        assert game.discount_percent is None
        assert game.tags == ()

    @pytest.mark.parametrize("raw", [None, [], "text", 3])
    def test_non_object_raises(self, raw) -> None:
        """Test payloads that are not objects carry no game."""
        with pytest.raises(NoDataError):
            normalize_extracted_game(raw)


class TestYellowcakeExtractor:
    """Tests for the client with the network stubbed out."""

    @pytest.mark.asyncio
    async def test_extract(self) -> None:
        """Test the request shape and the parsed record."""
        body = 'data: {"status": "working"}\ndata: {"data": [{"game_title": "Portal 2", "discount_percent": 50}]}\n'
        extractor = YellowcakeExtractor(MagicMock(), api_key="test-key")
        with patch.object(extractor, "_fetch", AsyncMock(return_value=body)) as mock_fetch:
            game = await extractor.extract("https://store.steampowered.com/app/620/")

        assert game.title == "Portal 2"
        assert game.discount_percent == 50
        kwargs = mock_fetch.await_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["is_json"] is False
        assert kwargs["headers"]["X-API-Key"] == "test-key"
        assert kwargs["payload"] == {"url": "https://store.steampowered.com/app/620/", "prompt": EXTRACTION_PROMPT}

    @pytest.mark.asyncio
    async def test_missing_key_makes_no_request(self) -> None:
        """Test an unconfigured key fails before any call."""
        extractor = YellowcakeExtractor(MagicMock(), api_key=None)
        with patch.object(extractor, "_fetch", AsyncMock()) as mock_fetch:
            with pytest.raises(UpstreamTransportError) as exc_info:
                await extractor.extract("https://example.com/game")
        mock_fetch.assert_not_awaited()
        assert "API key" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_unparsable_stream(self) -> None:
        """Test garbage streams surface as UnparsableStreamError."""
        extractor = YellowcakeExtractor(MagicMock(), api_key="test-key")
        with patch.object(extractor, "_fetch", AsyncMock(return_value="data: nope\n")):
            with pytest.raises(UnparsableStreamError):
                await extractor.extract("https://example.com/game")

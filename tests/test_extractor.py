"""Tests for the row extractor (parse, classify, fall back).

Pages are built from small HTML fixtures shaped like the explorer's
included-deposits table: ten cells per row, state icons in the last cell.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest
from bs4.builder import ParserRejectedMarkup

from dorascan.scanner.errors import ParseError
from dorascan.scanner.extractor import extract, inspect_rows, parse_page
from dorascan.scanner.models import (
    UNKNOWN_INDEX,
    UNKNOWN_PUBLIC_KEY,
    IconColor,
    RawPage,
)

from conftest import GREEN_ACTIVE, PLAIN_ACTIVE, RED_ACTIVE, YELLOW_ACTIVE

_URL = "https://example.com/validators/included_deposits?f=&c=100&p=4"


def _raw(html: str, page: int = 4) -> RawPage:
    return RawPage(page=page, url=_URL, html=html)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------

class TestClassification:
    def test_three_row_scenario(self, make_page, make_row) -> None:
        html = make_page([
            make_row(index="1", public_key="0xa", state=RED_ACTIVE),
            make_row(
                index="2",
                public_key="0xb",
                state='<span class="text-danger"><i></i></span> Exited',
            ),
            make_row(index="3", public_key="0xc", state=YELLOW_ACTIVE),
        ])

        hits = extract(_raw(html))

        assert len(hits) == 2
        assert [(h.index, h.color) for h in hits] == [
            ("1", IconColor.RED),
            ("3", IconColor.YELLOW),
        ]

    def test_row_without_active_never_hits(self, make_page, make_row) -> None:
        state = '<span class="text-danger"></span><span class="text-warning"></span> Pending'
        assert extract(_raw(make_page([make_row(state=state)]))) == []

    def test_active_without_indicator_never_hits(self, make_page, make_row) -> None:
        assert extract(_raw(make_page([make_row(state=PLAIN_ACTIVE)]))) == []

    def test_both_indicators_give_two_hits(self, make_page, make_row) -> None:
        state = (
            '<span class="text-danger"><i></i></span>'
            '<span class="text-warning"><i></i></span> Active'
        )
        hits = extract(_raw(make_page([make_row(index="77", public_key="0xdd", state=state)])))

        assert sorted(h.color.value for h in hits) == ["red", "yellow"]
        assert {(h.index, h.public_key) for h in hits} == {("77", "0xdd")}

    def test_active_match_is_case_insensitive(self, make_page, make_row) -> None:
        state = '<span class="text-danger"></span> ACTIVE'
        assert len(extract(_raw(make_page([make_row(state=state)])))) == 1

    def test_badge_danger_counts_as_red(self, make_page, make_row) -> None:
        state = '<span class="badge badge-danger">Active</span>'
        hits = extract(_raw(make_page([make_row(state=state)])))
        assert [h.color for h in hits] == [IconColor.RED]

    def test_svg_icon_with_danger_class(self, make_page, make_row) -> None:
        state = '<svg class="text-danger" viewBox="0 0 8 8"></svg> Active'
        hits = extract(_raw(make_page([make_row(state=state)])))
        assert [h.color for h in hits] == [IconColor.RED]

    def test_indicator_outside_state_cell_is_ignored(self, make_page) -> None:
        row = (
            "<tr>"
            + '<td><span class="text-danger">!</span></td>' * 9
            + f"<td>{PLAIN_ACTIVE}</td>"
            + "</tr>"
        )
        assert extract(_raw(make_page([row]))) == []


class TestGreenIndicator:
    def test_green_ignored_by_default(self, make_page, make_row) -> None:
        assert extract(_raw(make_page([make_row(state=GREEN_ACTIVE)]))) == []

    def test_green_reported_when_enabled(self, make_page, make_row, pinned_settings) -> None:
        pinned_settings.include_green = True
        hits = extract(_raw(make_page([make_row(state=GREEN_ACTIVE)])))
        assert [h.color for h in hits] == [IconColor.GREEN]

    def test_argument_overrides_setting(self, make_page, make_row, pinned_settings) -> None:
        html = make_page([make_row(state=GREEN_ACTIVE)])
        assert [h.color for h in extract(_raw(html), include_green=True)] == [IconColor.GREEN]
        assert pinned_settings.include_green is False

        pinned_settings.include_green = True
        assert extract(_raw(html), include_green=False) == []


# ---------------------------------------------------------------------------
# Field extraction
# ---------------------------------------------------------------------------

class TestFields:
    def test_hit_carries_page_url_and_columns(self, make_page, make_row) -> None:
        html = make_page([make_row(index="4242", public_key="0xfeed")])
        (hit,) = extract(_raw(html, page=9))

        assert hit.page == 9
        assert hit.url == _URL
        assert hit.index == "4242"
        assert hit.public_key == "0xfeed"

    def test_cell_text_is_stripped(self, make_page, make_row) -> None:
        html = make_page([make_row(index="\n   17  ", public_key=" <a href='/v/17'>0x17</a> ")])
        (hit,) = extract(_raw(html))
        assert hit.index == "17"
        assert hit.public_key == "0x17"

    def test_missing_columns_fall_back_to_sentinels(self, make_page, make_row) -> None:
        (hit,) = extract(_raw(make_page([make_row(cells=2)])))
        assert hit.index == UNKNOWN_INDEX
        assert hit.public_key == UNKNOWN_PUBLIC_KEY
        assert hit.color == IconColor.RED

    def test_missing_public_key_only(self, make_page, make_row) -> None:
        (hit,) = extract(_raw(make_page([make_row(index="5", cells=4)])))
        assert hit.index == "5"
        assert hit.public_key == UNKNOWN_PUBLIC_KEY


# ---------------------------------------------------------------------------
# Page-level behaviour
# ---------------------------------------------------------------------------

class TestParsePage:
    def test_counts_only_rows_with_cells(self, make_page, make_row) -> None:
        html = make_page([
            "<tr></tr>",
            make_row(state=PLAIN_ACTIVE),
            make_row(state=RED_ACTIVE),
        ])
        parsed = parse_page(_raw(html))

        assert parsed.row_count == 2
        assert len(parsed.hits) == 1

    def test_page_without_table_has_no_rows(self) -> None:
        parsed = parse_page(_raw("<html><body><p>No results</p></body></html>"))
        assert parsed.row_count == 0
        assert parsed.hits == []

    def test_malformed_html_is_tolerated(self) -> None:
        html = (
            "<table><tbody><tr><td>1<td>2<td>3"
            '<td><b class="text-warning">Active'
        )
        (hit,) = extract(_raw(html))
        assert hit.color == IconColor.YELLOW
        assert hit.index == "3"
        assert hit.public_key == UNKNOWN_PUBLIC_KEY

    def test_unclosed_cells_stay_separate(self) -> None:
        html = (
            "<table><tbody><tr>"
            "<td>s<td>t<td>42<td>d<td>0xkey<td>w<td>a<td>tx<td>inc"
            '<td><span class="text-danger"></span> Active'
            "</table>"
        )
        parsed = parse_page(_raw(html))

        assert parsed.row_count == 1
        assert [(h.index, h.public_key, h.color) for h in parsed.hits] == [
            ("42", "0xkey", IconColor.RED),
        ]

    def test_unclosed_row_does_not_borrow_next_status(self, make_page, make_row) -> None:
        first = make_row(index="1", public_key="0x1", state=PLAIN_ACTIVE)
        second = make_row(index="2", public_key="0x2", state=YELLOW_ACTIVE)
        parsed = parse_page(_raw(make_page([first.removesuffix("</tr>"), second])))

        assert parsed.row_count == 2
        assert [(h.index, h.color) for h in parsed.hits] == [("2", IconColor.YELLOW)]

    def test_table_without_tbody(self, make_row) -> None:
        html = f"<html><body><table>{make_row(index='8', public_key='0x8')}</table></body></html>"
        parsed = parse_page(_raw(html))

        assert parsed.row_count == 1
        assert [(h.index, h.color) for h in parsed.hits] == [("8", IconColor.RED)]

    def test_parser_rejection_raises_parse_error(self) -> None:
        with patch(
            "dorascan.scanner.extractor.BeautifulSoup",
            side_effect=ParserRejectedMarkup("unparseable"),
        ):
            with pytest.raises(ParseError) as excinfo:
                extract(_raw("<html>", page=6))

        assert excinfo.value.page == 6


class TestInspectRows:
    def test_describes_first_rows(self, make_page, make_row) -> None:
        html = make_page([
            make_row(index="1", state=RED_ACTIVE),
            make_row(index="2", state="Exited"),
            make_row(index="3", state=YELLOW_ACTIVE),
        ])
        rows = inspect_rows(_raw(html), limit=2)

        assert [r.index for r in rows] == ["1", "2"]
        assert rows[0].is_active is True
        assert rows[0].colors == (IconColor.RED,)
        assert rows[1].is_active is False
        assert rows[1].colors == ()
        assert rows[1].status_text == "Exited"

    def test_no_limit_returns_every_row(self, make_page, make_row) -> None:
        html = make_page([make_row(), make_row(), make_row()])
        assert len(inspect_rows(_raw(html))) == 3

from __future__ import annotations

import logging
from types import SimpleNamespace

import hypothesis.strategies as st
import pytest
from hypothesis import given, settings

from satsnr.core.models import Satellite
from satsnr.core.ranges import NmeaRange
from satsnr.render.snr_view import SnrView

ACTIVE = (1, 2, 3, 255)
INACTIVE = (4, 5, 6, 255)
GRID = (7, 8, 9, 255)
STRONG = (10, 11, 12, 255)

# (322 - 2) / 32 = 10 px per GPS column
W, H = 322, 100


def _view(**kw: object) -> SnrView:
    return SnrView(
        grid_stroke_px=2,
        height_ratio=0.15,
        max_snr=60.0,
        active_color=ACTIVE,
        inactive_color=INACTIVE,
        grid_color=GRID,
        grid_strong_color=STRONG,
        **kw,  # type: ignore[arg-type]
    )


def _vertical_lines(canvas, color) -> list[int]:
    return [
        c[1][0][0]
        for c in canvas.of("line")
        if c[1][0][0] == c[1][1][0] and c[2]["color"] == color
    ]


def test_empty_collection_draws_gps_grid_without_bars(canvas) -> None:
    view = _view()
    view.show_sats([])
    view.draw(canvas, (W, H))
    assert list(view.visible_ranges) == [NmeaRange.GPS]
    assert view.visible_ranges.num_bars() == 32
    assert canvas.of("rect") == []
    assert canvas.of("line")


def test_bar_geometry_and_color(canvas) -> None:
    view = _view()
    view.show_sats([Satellite(prn=1, snr=30.0, used_in_fix=True)])
    view.draw(canvas, (W, H))
    rects = canvas.of("rect")
    assert len(rects) == 1
    (p0, p1), kw = rects[0][1], rects[0][2]
    # x0 = 0*320//32 + 1, x1 = 320//32 - 1, top = int(98 * 0.5)
    assert p0 == (1, 49)
    assert p1 == (9, 100)
    assert kw["color"] == ACTIVE


def test_unused_satellite_uses_inactive_color(canvas) -> None:
    view = _view()
    view.show_sats([Satellite(prn=3, snr=10.0, used_in_fix=False)])
    view.draw(canvas, (W, H))
    assert canvas.of("rect")[0][2]["color"] == INACTIVE


def test_snr_is_clamped(canvas) -> None:
    view = _view()
    view.show_sats(
        [
            Satellite(prn=1, snr=60.0, used_in_fix=True),
            Satellite(prn=2, snr=90.0, used_in_fix=True),
        ]
    )
    view.draw(canvas, (W, H))
    tops = [c[1][0][1] for c in canvas.of("rect")]
    assert tops == [0, 0]


@settings(deadline=None, max_examples=100)
@given(snr=st.floats(min_value=60.0, max_value=1e6, allow_nan=False))
def test_bar_top_clamped_above_max(snr: float) -> None:
    view = _view()
    assert view.bar_top(snr, 98) == view.bar_top(60.0, 98)


def test_bar_top_degenerate_values() -> None:
    view = _view()
    assert view.bar_top(-5.0, 98) == 98
    assert view.bar_top(float("nan"), 98) == 98
    assert view.bar_top(float("inf"), 98) == 0


def test_bars_are_drawn_before_grid(canvas) -> None:
    view = _view()
    view.show_sats([Satellite(prn=p, snr=40.0, used_in_fix=True) for p in (1, 9, 31)])
    view.draw(canvas, (W, H))
    kinds = [c[0] for c in canvas.calls]
    last_rect = max(i for i, k in enumerate(kinds) if k == "rect")
    first_line = min(i for i, k in enumerate(kinds) if k == "line")
    assert last_rect < first_line


def test_gps_grid_lines(canvas) -> None:
    view = _view()
    view.show_sats([Satellite(prn=5, snr=20.0)])
    view.draw(canvas, (W, H))
    # ticks after every 4th ID, 32 is the range end
    assert _vertical_lines(canvas, GRID) == [1 + i * 10 for i in range(4, 32, 4)]
    # left edge, end of GPS range, right edge
    assert _vertical_lines(canvas, STRONG) == [1, 321, 321]
    horizontal = [c for c in canvas.of("line") if c[1][0][1] == c[1][1][1]]
    assert horizontal == [
        ("line", ((0, 99), (322, 99)), {"width": 2, "color": STRONG})
    ]


def test_glonass_extension_softens_boundary(canvas) -> None:
    view = _view()
    view.show_sats([Satellite(prn=70, snr=20.0)])
    view.draw(canvas, (W, H))
    assert view.visible_ranges.num_bars() == 24
    x88 = 1 + 24 * 320 // 24
    assert x88 in _vertical_lines(canvas, STRONG)

    canvas.calls.clear()
    view.show_sats([Satellite(prn=70, snr=20.0), Satellite(prn=90, snr=20.0)])
    view.draw(canvas, (W, H))
    assert view.visible_ranges.num_bars() == 32
    x88 = 1 + 24 * 320 // 32
    assert x88 in _vertical_lines(canvas, GRID)
    assert x88 not in _vertical_lines(canvas, STRONG)


def test_hidden_and_invalid_ids_are_not_drawn(
    canvas, caplog: pytest.LogCaptureFixture
) -> None:
    view = _view()
    view.show_sats(
        [
            Satellite(prn=4, snr=30.0),
            Satellite(prn=0, snr=30.0),
            Satellite(prn=250, snr=30.0),
            SimpleNamespace(snr=30.0, used_in_fix=True),
        ]
    )
    with caplog.at_level(logging.WARNING):
        view.draw(canvas, (W, H))
    assert len(canvas.of("rect")) == 1
    assert caplog.records


def test_visibility_recomputed_each_draw(canvas) -> None:
    view = _view()
    view.show_sats([Satellite(prn=75, snr=30.0)])
    view.draw(canvas, (W, H))
    assert NmeaRange.GLONASS in view.visible_ranges
    view.show_sats([Satellite(prn=12, snr=30.0)])
    view.draw(canvas, (W, H))
    assert list(view.visible_ranges) == [NmeaRange.GPS]


def test_show_sats_keeps_reference(canvas) -> None:
    view = _view()
    sats: list[Satellite] = []
    view.show_sats(sats)
    sats.append(Satellite(prn=8, snr=25.0, used_in_fix=True))
    view.draw(canvas, (W, H))
    assert len(canvas.of("rect")) == 1


def test_invalidate_and_dirty_flag(canvas) -> None:
    calls: list[int] = []
    view = _view(on_invalidate=lambda: calls.append(1))
    assert view.dirty
    view.draw(canvas, (W, H))
    assert not view.dirty
    view.show_sats([Satellite(prn=1, snr=1.0)])
    view.show_sats([Satellite(prn=2, snr=1.0)])
    assert view.dirty
    assert calls == [1, 1]


def test_background_cleared_first(canvas) -> None:
    view = _view(background=(0, 0, 0, 255))
    view.draw(canvas, (W, H))
    assert canvas.calls[0] == ("clear", ((0, 0, 0, 255),), {})


def test_tiny_area_draws_nothing(canvas) -> None:
    view = _view()
    view.show_sats([Satellite(prn=1, snr=30.0)])
    view.draw(canvas, (2, 2))
    assert canvas.calls == []
    assert not view.dirty


@pytest.mark.parametrize(
    "width,max_h,expected",
    [
        (480, 1000, (480, 72)),
        (480, 50, (480, 50)),
        (100, 1000, (100, 15)),
        (0, 100, (0, 0)),
    ],
)
def test_measure(width: int, max_h: int, expected: tuple[int, int]) -> None:
    assert _view().measure(width, max_h) == expected


def test_invalid_max_snr() -> None:
    with pytest.raises(ValueError):
        SnrView(max_snr=0)


def test_one_shot_iterator_is_materialized(canvas) -> None:
    view = _view()
    view.show_sats(iter([Satellite(prn=70, snr=30.0), Satellite(prn=71, snr=30.0)]))
    view.draw(canvas, (W, H))
    assert list(view.visible_ranges) == [NmeaRange.GLONASS]
    assert len(canvas.of("rect")) == 2


def test_infinite_prn_is_logged_not_raised(
    canvas, caplog: pytest.LogCaptureFixture
) -> None:
    view = _view()
    view.show_sats([SimpleNamespace(prn=float("inf"), snr=30.0, used_in_fix=True)])
    with caplog.at_level(logging.WARNING):
        view.draw(canvas, (W, H))
    assert canvas.of("rect") == []
    assert list(view.visible_ranges) == [NmeaRange.GPS]
    assert caplog.records


def test_huge_snr_is_logged_not_raised(
    canvas, caplog: pytest.LogCaptureFixture
) -> None:
    view = _view()
    view.show_sats(
        [
            SimpleNamespace(prn=5, snr=10**400, used_in_fix=True),
            Satellite(prn=6, snr=30.0, used_in_fix=True),
        ]
    )
    with caplog.at_level(logging.WARNING, logger="satsnr.render.snr_view"):
        view.draw(canvas, (W, H))
    assert len(canvas.of("rect")) == 1
    assert any("satellite 5" in r.getMessage() for r in caplog.records)


def test_record_missing_snr_is_logged_and_keeps_column(
    canvas, caplog: pytest.LogCaptureFixture
) -> None:
    view = _view()
    view.show_sats([SimpleNamespace(prn=70, used_in_fix=True)])
    with caplog.at_level(logging.WARNING, logger="satsnr.render.snr_view"):
        view.draw(canvas, (W, H))
    # The ID alone decides which ranges get columns
    assert list(view.visible_ranges) == [NmeaRange.GLONASS]
    assert canvas.of("rect") == []
    assert [r.levelno for r in caplog.records] == [logging.WARNING]
    assert "satellite 70" in caplog.records[0].getMessage()

import pytest

from personal_manager.services.progress import (
    MAX_CA_MARKS,
    ModuleTotals,
    build_progress_report,
    classify_total,
    module_progress,
    overall_status,
    round_half_up,
)


def _totals(module_id: int, total: float, count: int = 1) -> ModuleTotals:
    return ModuleTotals(
        module_id=module_id,
        module_name=f"Module {module_id}",
        module_code=f"M{module_id}",
        total_marks=total,
        assessment_count=count,
    )


@pytest.mark.parametrize(
    "total, tier",
    [(0, "failed"), (20, "failed"), (20.5, "failed"), (20.99, "failed"), (21, "good"), (21.5, "good"),
     (25, "good"), (25.5, "failed"), (25.9, "failed"), (25.99, "failed"), (26, "excellent"),
     (26.0, "excellent"), (26.5, "excellent"), (40, "excellent"), (45, "excellent")],
)
def test_classify_total_bands(total, tier):
    assert classify_total(total) == tier


def test_round_half_up():
    assert round_half_up(67.5) == 68
    assert round_half_up(62.5) == 63
    assert round_half_up(62.4) == 62
    assert round_half_up(0) == 0


def test_module_progress_caps_percentage_and_remaining():
    p = module_progress(_totals(1, 45, 3))
    assert p.percentage == 100
    assert p.remaining_marks == 0
    assert p.status == "excellent"
    assert p.status_color == "#28a745"


def test_module_progress_it101():
    p = module_progress(_totals(1, 27, 2))
    assert p.percentage == 68
    assert p.remaining_marks == MAX_CA_MARKS - 27
    assert p.status == "excellent"


def test_overall_status_rules():
    assert overall_status(0, 0, 0) == "failed"
    assert overall_status(3, 0, 3) == "excellent"
    # 3 of 5 good-or-better is exactly the 60% share
    assert overall_status(1, 2, 5) == "good"
    assert overall_status(1, 1, 5) == "failed"
    assert overall_status(0, 0, 4) == "failed"
    assert overall_status(0, 4, 4) == "good"


def test_empty_report():
    report = build_progress_report([])
    assert report.total_modules == 0
    assert report.percentage == 0
    assert report.status == "failed"
    assert report.status_color == "#dc3545"
    assert report.max_marks_per_module == 40
    assert report.modules == []


def test_report_sorted_and_counted():
    report = build_progress_report([_totals(1, 10), _totals(2, 30), _totals(3, 22)])
    assert [m.module_id for m in report.modules] == [2, 3, 1]
    assert (report.excellent_modules, report.good_modules, report.failed_modules) == (1, 1, 1)
    # module percentages 25, 75, 55 -> mean 51.67
    assert report.percentage == 52
    assert report.status == "good"
    assert report.status_color == "#ffc107"


def test_fractional_total_between_good_and_excellent_fails():
    report = build_progress_report([_totals(1, 25.5, 2)])
    module = report.modules[0]
    assert module.status == "failed"
    assert module.status_color == "#dc3545"
    assert (report.excellent_modules, report.good_modules, report.failed_modules) == (0, 0, 1)
    assert report.status == "failed"

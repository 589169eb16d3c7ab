"""
Tests for the mean, rate and proportion estimators.
"""

import warnings

import numpy as np
import pandas as pd
import pytest

from presize import (
    DegenerateIntervalWarning,
    InvalidArgument,
    MethodResolutionWarning,
    RootNotBracketed,
    RootSearchWarning,
    estimate_for_mean,
    estimate_for_proportion,
    estimate_for_rate,
)


@pytest.fixture
def no_warnings():
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        yield


class TestMean:
    def test_precision(self):
        res = estimate_for_mean(mu=5, sd=2.5, n=20)
        assert res.conf_width == pytest.approx(2.34, abs=0.01)
        assert res.lwr == pytest.approx(5 - res.conf_width / 2)
        assert res.upr == pytest.approx(5 + res.conf_width / 2)
        assert res.method == "precision for mean"
        assert isinstance(res.n, float)

    def test_sample_size(self):
        res = estimate_for_mean(mu=5, sd=2.5, conf_width=2.34)
        assert res.n == pytest.approx(20, abs=0.05)
        assert res.conf_width == pytest.approx(2.34)
        assert res.method == "sample size for mean"

    def test_round_trip(self):
        width = estimate_for_mean(mu=0, sd=1.3, n=57).conf_width
        assert estimate_for_mean(mu=0, sd=1.3, conf_width=width).n == pytest.approx(57, abs=1e-2)

    def test_vector_sd(self):
        res = estimate_for_mean(mu=5, sd=[2.5, 5.0], n=20)
        assert isinstance(res.conf_width, np.ndarray)
        assert res.conf_width[1] == pytest.approx(2 * res.conf_width[0])

    def test_both_missing(self):
        with pytest.raises(InvalidArgument):
            estimate_for_mean(mu=5, sd=2.5)

    def test_non_numeric_mu(self):
        with pytest.raises(InvalidArgument, match="'mu' must be numeric"):
            estimate_for_mean(mu="five", sd=2.5, n=20)

    def test_conf_level_range(self):
        with pytest.raises(InvalidArgument):
            estimate_for_mean(mu=5, sd=2.5, n=20, conf_level=95)

    def test_n_below_two(self):
        with pytest.raises(InvalidArgument):
            estimate_for_mean(mu=5, sd=2.5, n=1)

    def test_width_too_narrow(self):
        with pytest.raises(RootNotBracketed):
            estimate_for_mean(mu=5, sd=2.5, conf_width=1e-6)


class TestRate:
    def test_wald_and_vs_share_width(self):
        wald = estimate_for_rate(2.5, x=20, method="wald")
        vs = estimate_for_rate(2.5, x=20, method="vs")
        assert wald.conf_width == pytest.approx(vs.conf_width)
        assert wald.lwr != pytest.approx(vs.lwr)
        assert wald.upr != pytest.approx(vs.upr)
        assert vs.radj > wald.radj == 2.5

    def test_score_default(self):
        res = estimate_for_rate(2.5, x=20)
        assert res.method == "precision for a rate with score confidence interval"
        assert res.lwr < res.radj < res.upr
        assert res.time == pytest.approx(8.0)
        assert res.note.startswith("'x / r' units of time")

    def test_exact_bounds(self):
        res = estimate_for_rate(2.5, x=20, method="exact")
        assert res.radj == 2.5
        assert res.lwr < 2.5 < res.upr
        assert res.conf_width == pytest.approx(res.upr - res.lwr)

    def test_wald_sample_size(self):
        res = estimate_for_rate(2.5, conf_width=1.0, method="wald")
        assert res.x == pytest.approx((1.959963984540054 * 2.5 / 0.5) ** 2)

    @pytest.mark.parametrize("method", ["score", "exact", "vs", "wald"])
    def test_round_trip(self, method):
        width = estimate_for_rate(2.5, x=50, method=method).conf_width
        res = estimate_for_rate(2.5, conf_width=width, method=method)
        assert res.x == pytest.approx(50, abs=1e-2)
        assert res.conf_width == pytest.approx(width)

    def test_vs_zero_rate_degenerate(self):
        with pytest.warns(DegenerateIntervalWarning, match="degenerate"):
            res = estimate_for_rate(0, x=20, method="vs")
        assert res.conf_width == 0.0
        assert res.time == np.inf

    def test_negative_lower_bound_warns(self):
        with pytest.warns(DegenerateIntervalWarning, match="below 0"):
            res = estimate_for_rate(2.5, x=2, method="wald")
        assert res.lwr < 0

    def test_abbreviated_method(self):
        res = estimate_for_rate(2.5, x=20, method="ex")
        assert "exact" in res.method

    def test_negative_rate(self):
        with pytest.raises(InvalidArgument):
            estimate_for_rate(-1, x=20)

    def test_integer_method_falls_back(self):
        with pytest.warns(MethodResolutionWarning):
            res = estimate_for_rate(2.5, x=20, method=1)
        assert "score" in res.method

    def test_zero_rate_score_no_numpy_warnings(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error", RuntimeWarning)
            res = estimate_for_rate(0, x=20)
        assert res.time == np.inf

    def test_zero_rate_vs_sample_size_only_degenerate_warning(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            estimate_for_rate(0, conf_width=0.5, method="vs")
        assert caught
        assert all(issubclass(w.category, DegenerateIntervalWarning) for w in caught)

    def test_vector(self):
        vec = estimate_for_rate([2.5, 4.0], x=[20, 40], method="score")
        for i, (r, x) in enumerate([(2.5, 20), (4.0, 40)]):
            single = estimate_for_rate(r, x=x, method="score")
            assert vec.conf_width[i] == pytest.approx(single.conf_width)
            assert vec.radj[i] == pytest.approx(single.radj)


class TestProportion:
    def test_wilson_vector(self):
        res = estimate_for_proportion(p=[0.2, 0.4], n=[100, 200], method="wilson")
        assert res.padj.shape == (2,)
        assert 0.2 < res.padj[0] < 0.5
        assert 0.4 < res.padj[1] < 0.5
        assert res.note == "padj is the adjusted proportion, from which the ci is calculated."

    def test_wider_for_smaller_n(self):
        res = estimate_for_proportion(p=0.2, n=[100, 200])
        assert res.conf_width[1] < res.conf_width[0]

    def test_vector_matches_scalar_calls(self):
        vec = estimate_for_proportion(p=[0.2, 0.4], n=[100, 200])
        for i, (p, n) in enumerate([(0.2, 100), (0.4, 200)]):
            single = estimate_for_proportion(p=p, n=n)
            assert vec.conf_width[i] == pytest.approx(single.conf_width)
            assert vec.lwr[i] == pytest.approx(single.lwr)
            assert vec.upr[i] == pytest.approx(single.upr)
            assert vec.padj[i] == pytest.approx(single.padj)

    def test_unknown_method_falls_back(self):
        with pytest.warns(MethodResolutionWarning):
            res = estimate_for_proportion(p=0.2, n=10, method="unknownxyz")
        assert "wilson" in res.method
        assert 0 < res.lwr < res.padj < res.upr < 1

    def test_ac_alias(self, no_warnings):
        res = estimate_for_proportion(p=0.3, n=100, method="ac")
        assert res.method == "precision for a proportion with agresti-coull confidence interval"

    @pytest.mark.parametrize("method", ["wilson", "agresti-coull", "exact", "wald"])
    def test_round_trip(self, method):
        width = estimate_for_proportion(p=0.3, n=50, method=method).conf_width
        res = estimate_for_proportion(p=0.3, conf_width=width, method=method)
        assert res.n == pytest.approx(50, abs=1e-2)
        assert res.method.startswith("sample size")

    def test_exact_boundaries(self):
        lo = estimate_for_proportion(p=0.0, n=10, method="exact")
        hi = estimate_for_proportion(p=1.0, n=10, method="exact")
        assert lo.lwr == 0.0
        assert hi.upr == 1.0
        assert np.isnan(lo.padj)
        assert lo.note is None

    def test_wald_negative_lower_bound(self):
        with pytest.warns(DegenerateIntervalWarning, match="below 0"):
            res = estimate_for_proportion(p=0.05, n=10, method="wald")
        assert res.lwr < 0

    def test_wald_upper_bound_above_one(self):
        with pytest.warns(DegenerateIntervalWarning, match="above 1"):
            res = estimate_for_proportion(p=0.95, n=10, method="wald")
        assert res.upr > 1

    def test_agresti_coull_negative_lower_bound(self):
        with pytest.warns(DegenerateIntervalWarning):
            res = estimate_for_proportion(p=0.01, n=5, method="ac")
        assert res.lwr < 0

    def test_wilson_stays_in_unit_interval(self, no_warnings):
        res = estimate_for_proportion(p=0.01, n=5, method="wilson")
        assert 0 <= res.lwr and res.upr <= 1

    def test_p_out_of_range(self):
        with pytest.raises(InvalidArgument):
            estimate_for_proportion(p=1.2, n=10)

    def test_mismatched_lengths(self):
        with pytest.raises(InvalidArgument, match="equal lengths"):
            estimate_for_proportion(p=[0.1, 0.2, 0.3], n=[10, 20])

    def test_unreachable_width_raises(self):
        with pytest.raises(RootNotBracketed):
            estimate_for_proportion(p=[0.2, 0.2], conf_width=[0.1, 1e-6])

    def test_unreachable_width_coerce(self):
        with pytest.warns(RootSearchWarning, match="element 1"):
            res = estimate_for_proportion(p=[0.2, 0.2], conf_width=[0.1, 1e-6], errors="coerce")
        assert res.n[0] > 1
        assert np.isnan(res.n[1])
        assert np.isnan(res.lwr[1])
        assert res.conf_width[0] == pytest.approx(0.1)

    def test_to_frame(self):
        df = estimate_for_proportion(p=[0.2, 0.4], n=100).to_frame()
        assert isinstance(df, pd.DataFrame)
        assert len(df) == 2
        assert list(df.columns[:3]) == ["p", "padj", "n"]
        assert (df["method"] == "precision for a proportion with wilson confidence interval").all()

    def test_result_is_frozen(self):
        res = estimate_for_proportion(p=0.2, n=100)
        with pytest.raises(AttributeError):
            res.n = 10


class TestCommonArguments:
    """tol, vector conf_level and errors are shared by every estimator."""

    @pytest.mark.parametrize(
        "estimate, kwargs, count",
        [
            (estimate_for_mean, {"mu": 5, "sd": 2.5}, "n"),
            (estimate_for_rate, {"r": 2.5, "method": "exact"}, "x"),
            (estimate_for_proportion, {"p": 0.3, "method": "wilson"}, "n"),
        ],
    )
    def test_tight_tol_round_trip(self, estimate, kwargs, count):
        width = estimate(**kwargs, **{count: 37}).conf_width
        res = estimate(**kwargs, conf_width=width, tol=1e-8)
        assert getattr(res, count) == pytest.approx(37, abs=1e-6)

    def test_bad_tol(self):
        with pytest.raises(InvalidArgument, match="tol"):
            estimate_for_proportion(p=0.2, conf_width=0.1, tol=0)

    def test_vector_conf_level(self):
        vec = estimate_for_proportion(p=0.3, n=80, conf_level=[0.9, 0.95])
        assert vec.conf_level.tolist() == [0.9, 0.95]
        assert vec.conf_width[0] < vec.conf_width[1]
        for i, level in enumerate([0.9, 0.95]):
            single = estimate_for_proportion(p=0.3, n=80, conf_level=level)
            assert vec.conf_width[i] == pytest.approx(single.conf_width)

    def test_vector_conf_level_round_trip(self):
        res = estimate_for_mean(mu=5, sd=2.5, conf_width=2.34, conf_level=[0.9, 0.95])
        assert res.n[1] == pytest.approx(20, abs=0.05)
        assert res.n[0] < res.n[1]
        back = estimate_for_mean(mu=5, sd=2.5, n=res.n, conf_level=[0.9, 0.95])
        assert back.conf_width == pytest.approx([2.34, 2.34], abs=1e-3)

    @pytest.mark.parametrize(
        "call",
        [
            lambda: estimate_for_proportion(p=0.2, n=10, errors="bogus"),
            lambda: estimate_for_rate(2.5, conf_width=1.0, method="wald", errors="bogus"),
            lambda: estimate_for_mean(mu=5, sd=2.5, n=20, errors="bogus"),
        ],
    )
    def test_bad_errors_mode(self, call):
        with pytest.raises(InvalidArgument, match="'errors'"):
            call()

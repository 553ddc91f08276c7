"""End-to-end tests for wavelet variance estimation."""

import dataclasses

import numpy as np
import pandas as pd
import pytest

import wavevar
from wavevar import WaveletVarianceMethod, robust_eda, wvar
from wavevar.errors import (
    EfficiencyTooHigh, InsufficientLength, InvalidConfidenceLevel, InvalidInput,
    UnknownFilter, UnsupportedUnit, WaveletVarianceWarning
)


class TestDefaults:
    """Test the default configuration path."""

    def test_metadata(self, white_noise):
        result = wvar(white_noise[:1000])
        assert result.decomp == "modwt"
        assert result.filter == "haar"
        assert not result.robust
        assert result.eff is None
        assert result.alpha == 0.05
        assert result.unit is None
        assert result.method_name == "classical"
        assert result.n_levels == 9

    def test_scales(self, white_noise):
        result = wvar(white_noise[:256])
        np.testing.assert_array_equal(result.scales, 2.0 ** np.arange(1, 9))

    def test_bounds_bracket_estimates(self, white_noise):
        result = wvar(white_noise)
        assert np.all(result.ci_low <= result.variance)
        assert np.all(result.variance <= result.ci_high)

    def test_quick_setup(self):
        config = wavevar.quick_setup(robust=True, eff=0.8)
        assert config['robust'] is True
        assert config['eff'] == 0.8
        assert config['decomp'] == "modwt"

    def test_validate_config(self):
        wavevar.validate_config()


class TestWhiteNoise:
    """Wavelet variance of white noise."""

    def test_sum_matches_sample_variance(self, white_noise):
        result = wvar(white_noise)
        assert np.sum(result.variance) == pytest.approx(np.var(white_noise), rel=0.05)

    def test_halves_per_level(self, white_noise):
        result = wvar(white_noise, nlevels=4)
        expected = 4.0 / 2.0 ** np.arange(1, 5)
        np.testing.assert_allclose(result.variance, expected, rtol=0.25)

    def test_dwt_halves_per_level(self, white_noise):
        result = wvar(white_noise, decomp="dwt", nlevels=4)
        expected = 4.0 / 2.0 ** np.arange(1, 5)
        np.testing.assert_allclose(result.variance, expected, rtol=0.25)

    def test_degrees_of_freedom_per_decomposition(self, white_noise):
        modwt = wvar(white_noise, nlevels=3)
        dwt = wvar(white_noise, decomp="dwt", nlevels=3)
        np.testing.assert_array_equal(dwt.dof, [4096.0, 2048.0, 1024.0])
        assert np.all(modwt.dof < dwt.dof * 2)

    def test_robust_close_to_classical(self, white_noise):
        classical = wvar(white_noise, nlevels=4)
        robust = wvar(white_noise, nlevels=4, robust=True, eff=0.99)
        np.testing.assert_allclose(robust.variance, classical.variance, rtol=0.05)

    def test_robust_has_wider_intervals(self, white_noise):
        classical = wvar(white_noise, nlevels=4)
        robust = wvar(white_noise, nlevels=4, robust=True, eff=0.6)
        assert np.all(robust.dof < classical.dof)
        np.testing.assert_allclose(robust.effective_count, 0.6 * classical.effective_count, rtol=1e-5)


class TestContamination:
    """Robust estimates resist isolated outliers in a random walk."""

    @staticmethod
    def _contaminate(x, rng, amplitude):
        y = x.copy()
        idx = rng.choice(x.size, size=x.size // 100, replace=False)
        y[idx] += amplitude * rng.choice([-1.0, 1.0], size=idx.size)
        return y

    def test_robust_stable_classical_not(self, random_walk, rng):
        dirty = self._contaminate(random_walk, rng, amplitude=10.0)

        clean_rob = wvar(random_walk, nlevels=2, robust=True, eff=0.6)
        dirty_rob = wvar(dirty, nlevels=2, robust=True, eff=0.6)
        clean_cls = wvar(random_walk, nlevels=2)
        dirty_cls = wvar(dirty, nlevels=2)

        rob_dev = np.abs(dirty_rob.variance / clean_rob.variance - 1.0)
        cls_dev = np.abs(dirty_cls.variance / clean_cls.variance - 1.0)
        assert np.all(rob_dev < 0.2)
        assert np.all(cls_dev > 0.5)


class TestUnits:
    """Test sampling frequency and unit handling."""

    def test_frequency(self, white_noise):
        result = wvar(white_noise[:64], freq=4.0)
        np.testing.assert_allclose(result.scales, 2.0 ** np.arange(1, 7) / 4.0)

    def test_conversion(self, white_noise):
        base = wvar(white_noise[:64], from_unit="sec")
        converted = wvar(white_noise[:64], from_unit="sec", to_unit="min")
        assert base.unit == "sec"
        assert converted.unit == "min"
        np.testing.assert_array_equal(converted.scales, base.scales / 60.0)
        np.testing.assert_array_equal(converted.variance, base.variance)

    def test_target_without_source(self, white_noise):
        with pytest.warns(WaveletVarianceWarning, match="not done"):
            result = wvar(white_noise[:64], to_unit="min")
        assert result.unit is None
        assert any("not done" in w for w in result.warnings)
        np.testing.assert_array_equal(result.scales, 2.0 ** np.arange(1, 7))

    def test_unsupported_unit(self, white_noise):
        with pytest.raises(UnsupportedUnit):
            wvar(white_noise[:64], from_unit="sec", to_unit="fortnight")


class TestWarnings:
    """Non-fatal anomalies are recorded on the result."""

    def test_dwt_truncation(self, white_noise):
        with pytest.warns(WaveletVarianceWarning, match="truncated"):
            result = wvar(white_noise[:100], decomp="dwt", nlevels=3)
        assert result.n_levels == 3
        assert any("truncated" in w for w in result.warnings)

    def test_degenerate_levels(self, white_noise):
        with pytest.warns(WaveletVarianceWarning, match="degenerate"):
            result = wvar(white_noise[:64], filter="d4")
        assert result.n_levels == 6
        assert not result.degenerate[:4].any()
        assert result.degenerate[4:].all()
        assert np.isnan(result.variance[4:]).all()
        assert np.isfinite(result.variance[:4]).all()

    def test_non_convergence(self, white_noise):
        with pytest.warns(WaveletVarianceWarning, match="did not converge"):
            result = wvar(white_noise[:256], nlevels=2, robust=True, tol=1e-300, max_iter=1)
        assert not result.converged.any()
        assert np.isfinite(result.variance).all()


class TestErrors:
    """Hard failures are typed."""

    def test_too_many_levels(self, white_noise):
        with pytest.raises(InsufficientLength):
            wvar(white_noise[:100], nlevels=7)

    def test_efficiency_too_high(self, white_noise):
        with pytest.raises(EfficiencyTooHigh):
            wvar(white_noise[:100], robust=True, eff=0.995)

    def test_high_efficiency_fine_for_classical(self, white_noise):
        assert wvar(white_noise[:100], eff=0.995).eff is None

    @pytest.mark.parametrize("x", [None, [], [1.0, 2.0, 3.0], [1.0, np.nan, 2.0, 3.0, 4.0],
                                   np.ones((8, 2)), ["a", "b", "c", "d"]])
    def test_invalid_series(self, x):
        with pytest.raises(InvalidInput):
            wvar(x)

    def test_single_column_matrix(self, white_noise):
        column = wvar(white_noise[:64].reshape(-1, 1))
        flat = wvar(white_noise[:64])
        np.testing.assert_array_equal(column.variance, flat.variance)

    @pytest.mark.parametrize("freq", [0, -2.0, [1.0, 2.0]])
    def test_invalid_frequency(self, white_noise, freq):
        with pytest.raises(InvalidInput):
            wvar(white_noise[:64], freq=freq)

    def test_invalid_alpha(self, white_noise):
        with pytest.raises(InvalidConfidenceLevel):
            wvar(white_noise[:64], alpha=1.5)

    def test_numpy_scalar_options(self, white_noise):
        result = wvar(white_noise[:256], alpha=np.float32(0.1), robust=True,
                      eff=np.float32(0.6), nlevels=np.int64(3))
        assert result.n_levels == 3
        assert result.alpha == pytest.approx(0.1)
        assert result.confidence == pytest.approx(0.9)

    @pytest.mark.parametrize("nlevels", ["abc", "3", 2.5, 0, True, float("nan")])
    def test_invalid_nlevels(self, white_noise, nlevels):
        with pytest.raises(InvalidInput):
            wvar(white_noise[:64], nlevels=nlevels)

    @pytest.mark.parametrize("eff", [None, "0.6", float("nan"), 0.0])
    def test_invalid_robust_efficiency(self, white_noise, eff):
        with pytest.raises(InvalidInput):
            wvar(white_noise[:64], robust=True, eff=eff)

    @pytest.mark.parametrize("options", [{'tol': "small"}, {'tol': 0.0}, {'max_iter': 2.5},
                                         {'max_iter': 0}])
    def test_invalid_iteration_options(self, white_noise, options):
        with pytest.raises(InvalidInput):
            wvar(white_noise[:64], robust=True, **options)

    def test_unknown_filter(self, white_noise):
        with pytest.raises(UnknownFilter):
            wvar(white_noise[:64], filter="morlet")

    def test_unknown_decomposition(self, white_noise):
        with pytest.raises(InvalidInput):
            wvar(white_noise[:64], decomp="cwt")


class TestResult:
    """Test the result container."""

    def test_read_only(self, white_noise):
        result = wvar(white_noise[:64])
        with pytest.raises(ValueError):
            result.variance[0] = 0.0
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.robust = True

    def test_to_frame(self, white_noise):
        result = wvar(white_noise[:64])
        frame = result.to_frame()
        assert isinstance(frame, pd.DataFrame)
        assert list(frame.columns) == ['level', 'variance', 'ci_low', 'ci_high']
        assert frame.index.name == 'scale'
        assert len(frame) == 6
        np.testing.assert_array_equal(frame['variance'].to_numpy(), result.variance)

    def test_robust_metadata(self, white_noise):
        result = wvar(white_noise[:64], robust=True, eff=0.7)
        assert result.robust
        assert result.eff == 0.7
        assert result.method_name == "robust"
        assert result.confidence == pytest.approx(0.95)


class TestMethod:
    """Test the method object."""

    def test_method_info(self):
        info = WaveletVarianceMethod({'robust': True}).get_method_info()
        assert info['name'] == 'WaveletVarianceMethod'
        assert info['estimator'] == 'robust'
        assert info['efficiency'] == '0.6'

    def test_parallel_matches_serial(self, white_noise):
        serial = WaveletVarianceMethod({'robust': True}).compute(white_noise[:512])
        parallel = WaveletVarianceMethod({'robust': True, 'n_jobs': 2}).compute(white_noise[:512])
        np.testing.assert_allclose(parallel.variance, serial.variance)
        np.testing.assert_allclose(parallel.ci_high, serial.ci_high)

    def test_invalid_config_fails_early(self):
        with pytest.raises(EfficiencyTooHigh):
            WaveletVarianceMethod({'robust': True, 'eff': 1.0})


def test_robust_eda(white_noise):
    classical, robust, rng = robust_eda(white_noise[:512], eff=0.8)
    assert not classical.robust
    assert robust.robust and robust.eff == 0.8
    assert rng.scale_max == 512.0
    assert rng.variance_max >= max(np.nanmax(classical.ci_high), np.nanmax(robust.ci_high))

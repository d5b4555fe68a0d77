"""
Tests for overall desirability combination.

The combiner reduces several desirability series to one composite per
record with a weighted geometric mean:

    D[r] = exp( sum_i w_i * ln(d_i[r]) / sum_i w_i )

A zero in any series vetoes the record; a NaN makes it missing.
"""

import json

import numpy as np
import pytest


# =============================================================================
# WEIGHTED GEOMETRIC MEAN TESTS
# =============================================================================


class TestOverallDesirability:
    """Test the weighted geometric mean."""

    def test_zero_vetoes_record(self):
        """Record-wise: (1*1)^.5=1, (0*1)^.5=0, (1*0)^.5=0."""
        from src.desirability.combiner import overall_desirability

        result = overall_desirability([[1, 0, 1], [1, 1, 0]], weights=[1, 1])

        np.testing.assert_array_equal(result, [1.0, 0.0, 0.0])

    def test_zero_is_exact_regardless_of_weights(self):
        """A single zero forces exactly 0 whatever the other values and weights."""
        from src.desirability.combiner import overall_desirability

        series = [[0.0, 0.9], [1.0, 1e-300], [1.0, 0.7]]
        result = overall_desirability(series, weights=[1e-6, 50, 3])

        assert result[0] == 0.0
        assert result[1] > 0.0

    def test_geometric_mean_value(self):
        """Equal weights give the plain geometric mean."""
        from src.desirability.combiner import overall_desirability

        result = overall_desirability([[0.25, 0.5], [1.0, 0.5]])

        np.testing.assert_allclose(result, [0.5, 0.5])

    def test_weighted_value(self):
        """Weights act as exponents."""
        from src.desirability.combiner import overall_desirability

        result = overall_desirability([[0.2], [0.8]], weights=[3, 1])

        np.testing.assert_allclose(result, [(0.2**3 * 0.8) ** 0.25])

    def test_weight_ratio_invariance(self):
        """Only ratios between weights matter."""
        from src.desirability.combiner import overall_desirability

        series = [[0.3, 0.9, 0.5], [0.7, 0.2, 0.5]]
        a = overall_desirability(series, weights=[2, 1])
        b = overall_desirability(series, weights=[20, 10])
        c = overall_desirability(series, weights=[1, 0.5])

        np.testing.assert_allclose(a, b)
        np.testing.assert_allclose(a, c)

    def test_default_weights_are_equal(self):
        """Omitting weights equals passing all ones."""
        from src.desirability.combiner import overall_desirability

        series = [[0.3, 0.9], [0.7, 0.2], [0.5, 0.6]]

        np.testing.assert_array_equal(
            overall_desirability(series),
            overall_desirability(series, weights=[1, 1, 1]),
        )

    def test_many_small_values_do_not_underflow(self):
        """The log-domain form survives products that underflow naively."""
        from src.desirability.combiner import overall_desirability

        series = [[1e-10]] * 400
        result = overall_desirability(series)

        assert np.prod(np.array(series)) == 0.0
        np.testing.assert_allclose(result, [1e-10], rtol=1e-9)

    def test_missing_propagates(self):
        """NaN desirability gives a NaN composite, not 0."""
        from src.desirability.combiner import overall_desirability

        result = overall_desirability([[0.5, np.nan], [0.5, 0.5]])

        assert result[0] == pytest.approx(0.5)
        assert np.isnan(result[1])

    def test_zero_beats_missing(self):
        """An explicit zero vetoes the record even when another value is missing."""
        from src.desirability.combiner import overall_desirability

        result = overall_desirability([[np.nan], [0.0]])

        assert result[0] == 0.0

    def test_scalar_inputs_return_float(self):
        """All-scalar input gives a float."""
        from src.desirability.combiner import overall_desirability

        result = overall_desirability([0.25, 1.0])

        assert isinstance(result, float)
        assert result == pytest.approx(0.5)

    def test_single_series_is_identity(self):
        """One series combines to itself."""
        from src.desirability.combiner import overall_desirability

        series = np.array([0.1, 0.4, 1.0])
        np.testing.assert_allclose(overall_desirability([series], weights=[7]), series)

    def test_result_within_input_range(self, rng):
        """The composite lies between the smallest and largest inputs."""
        from src.desirability.combiner import overall_desirability

        series = rng.uniform(0.01, 1.0, size=(5, 300))
        result = overall_desirability(series, weights=[1, 2, 3, 4, 5])

        assert np.all(result >= series.min(axis=0) - 1e-12)
        assert np.all(result <= series.max(axis=0) + 1e-12)


class TestOverallDesirabilityErrors:
    """Validation happens before any combination."""

    def test_length_mismatch(self):
        """Series of unequal length fail."""
        from src.desirability.combiner import overall_desirability
        from src.desirability.errors import LengthMismatchError

        with pytest.raises(LengthMismatchError):
            overall_desirability([[1, 2], [1, 2, 3]])

    def test_empty_series(self):
        """An empty series list fails."""
        from src.desirability.combiner import overall_desirability
        from src.desirability.errors import InvalidInputError

        with pytest.raises(InvalidInputError):
            overall_desirability([])

    @pytest.mark.parametrize("weights", [[1, 0], [1, -2], [1, np.nan], [1], [1, 1, 1]])
    def test_invalid_weights(self, weights):
        """Weights must be positive and one per series."""
        from src.desirability.combiner import overall_desirability
        from src.desirability.errors import InvalidWeightError

        with pytest.raises(InvalidWeightError):
            overall_desirability([[0.5], [0.5]], weights=weights)

    def test_negative_desirability(self):
        """Negative desirabilities cannot be combined."""
        from src.desirability.combiner import overall_desirability
        from src.desirability.errors import InvalidInputError

        with pytest.raises(InvalidInputError):
            overall_desirability([[0.5, -0.1], [0.5, 0.5]])

    def test_multidimensional_series_rejected(self):
        """A 2-D series is not flattened to match a 1-D one."""
        from src.desirability.combiner import overall_desirability
        from src.desirability.errors import InvalidInputError

        with pytest.raises(InvalidInputError, match="1-D"):
            overall_desirability([np.ones((2, 3)), np.ones(6)])


class TestOverallDesirabilityLogging:
    """Combination reports vetoed and missing record counts."""

    def test_debug_summary(self, caplog):
        """A debug line summarises the combination."""
        import logging
        from src.desirability.combiner import overall_desirability

        caplog.set_level(logging.DEBUG, logger="src.desirability.combiner")
        overall_desirability([[0.0, np.nan, 0.5], [1.0, 1.0, 0.5]])

        assert "Combined 2 series over 3 records (1 vetoed, 1 missing)" in caplog.text


# =============================================================================
# CRITERION / COMBINER TESTS
# =============================================================================


class TestCriterion:
    """Test Criterion definition."""

    def test_create_criterion(self):
        """Can create a criterion with a function and weight."""
        from src.desirability.combiner import Criterion
        from src.desirability.functions import LowIsGood

        criterion = Criterion(name="p_value", function=LowIsGood(0.001, 0.1), weight=2.0)

        assert criterion.name == "p_value"
        assert criterion.weight == 2.0

    def test_default_weight(self):
        """Weight defaults to 1."""
        from src.desirability.combiner import Criterion
        from src.desirability.functions import HighIsGood

        assert Criterion("x", HighIsGood(0, 1)).weight == 1.0

    @pytest.mark.parametrize("weight", [0, -1.0, np.inf])
    def test_weight_must_be_positive(self, weight):
        """Non-positive weights are rejected."""
        from src.desirability.combiner import Criterion
        from src.desirability.errors import InvalidWeightError
        from src.desirability.functions import HighIsGood

        with pytest.raises(InvalidWeightError, match="weight"):
            Criterion("x", HighIsGood(0, 1), weight=weight)

    def test_apply(self):
        """Criterion applies its desirability function."""
        from src.desirability.combiner import Criterion
        from src.desirability.functions import HighIsGood

        criterion = Criterion("x", HighIsGood(0.2, 0.8))

        np.testing.assert_allclose(criterion.apply([0.0, 0.5, 1.0]), [0.0, 0.5, 1.0])


class TestDesirabilityCombiner:
    """Test DesirabilityCombiner over named inputs."""

    @pytest.fixture
    def combiner(self):
        from src.desirability.combiner import Criterion, DesirabilityCombiner
        from src.desirability.functions import (
            CategoricalDesirability,
            EndsIsGood,
            LowIsGood,
        )

        return DesirabilityCombiner(
            name="test",
            criteria=[
                Criterion("p_value", LowIsGood(0.0, 0.1), weight=2.0),
                Criterion("lfc", EndsIsGood(-2, -1, 1, 2), weight=1.0),
                Criterion("class", CategoricalDesirability({"kinase": 1.0, "other": 0.5}), weight=1.0),
            ],
        )

    @pytest.fixture
    def inputs(self):
        return {
            "p_value": np.array([0.0, 0.05, 0.2, 0.01]),
            "lfc": np.array([3.0, -1.5, 2.0, 0.0]),
            "class": ["kinase", "other", "kinase", "kinase"],
        }

    def test_component_scores(self, combiner, inputs):
        """Each criterion is scored independently."""
        scores = combiner.get_component_scores(inputs)

        np.testing.assert_allclose(scores["p_value"], [1.0, 0.5, 0.0, 0.9])
        np.testing.assert_allclose(scores["lfc"], [1.0, 0.5, 1.0, 0.0])
        np.testing.assert_array_equal(scores["class"], [1.0, 0.5, 1.0, 1.0])

    def test_compute_matches_overall(self, combiner, inputs):
        """compute() is overall_desirability of the component scores."""
        from src.desirability.combiner import overall_desirability

        scores = combiner.get_component_scores(inputs)
        expected = overall_desirability(
            [scores["p_value"], scores["lfc"], scores["class"]],
            weights=[2.0, 1.0, 1.0],
        )

        result = combiner.compute(inputs)

        np.testing.assert_allclose(result, expected)
        assert result[0] == 1.0
        assert result[2] == 0.0
        assert result[3] == 0.0

    def test_rank(self, combiner, inputs):
        """rank() orders records best first."""
        order = combiner.rank(inputs)

        assert order[0] == 0
        assert order[1] == 1
        assert set(order[2:]) == {2, 3}

    def test_rank_puts_missing_last(self):
        """Records with a missing composite rank last."""
        from src.desirability.combiner import Criterion, DesirabilityCombiner
        from src.desirability.functions import HighIsGood

        combiner = DesirabilityCombiner("t", [Criterion("x", HighIsGood(0, 1))])
        order = combiner.rank({"x": [np.nan, 0.2, 0.9]})

        np.testing.assert_array_equal(order, [2, 1, 0])

    def test_missing_input_raises(self, combiner, inputs):
        """Every criterion needs an input column."""
        del inputs["lfc"]

        with pytest.raises(KeyError, match="lfc"):
            combiner.compute(inputs)

    def test_needs_criteria(self):
        """An empty combiner is rejected."""
        from src.desirability.combiner import DesirabilityCombiner
        from src.desirability.errors import InvalidInputError

        with pytest.raises(InvalidInputError):
            DesirabilityCombiner(name="empty", criteria=[])

    def test_duplicate_names_rejected(self):
        """Criterion names must be unique."""
        from src.desirability.combiner import Criterion, DesirabilityCombiner
        from src.desirability.errors import InvalidInputError
        from src.desirability.functions import HighIsGood

        with pytest.raises(InvalidInputError, match="Duplicate"):
            DesirabilityCombiner(
                name="dup",
                criteria=[Criterion("x", HighIsGood(0, 1)), Criterion("x", HighIsGood(1, 2))],
            )

    def test_serialization_round_trip(self, combiner, inputs):
        """to_dict/from_dict through JSON preserves behaviour."""
        from src.desirability.combiner import DesirabilityCombiner

        data = json.loads(json.dumps(combiner.to_dict()))
        restored = DesirabilityCombiner.from_dict(data)

        assert restored.name == combiner.name
        assert restored.criteria == combiner.criteria
        np.testing.assert_array_equal(restored.compute(inputs), combiner.compute(inputs))

"""
Unit tests for BlendComparison.
"""
import pytest

from evaluation.blend_comparison import BlendComparison, compare_blends, generate_mixed_data


class TestBlendComparison:
    """Test suite for BlendComparison."""

    def test_run_comparison(self, mixed_dataset):
        comparison = BlendComparison(mixed_dataset, blends=(0, 50), n_folds=4)
        results = comparison.run_comparison()
        assert [r.label for r in results] == ["Blend 0%", "Blend 50%", "Entropic"]
        assert all(r.scoring == 'accuracy' for r in results)
        assert all(0.0 <= r.mean_score <= 1.0 for r in results)
        assert all(r.elapsed >= 0.0 for r in results)

    def test_best_before_run(self, mixed_dataset):
        with pytest.raises(ValueError):
            BlendComparison(mixed_dataset).get_best()

    def test_best_has_highest_accuracy(self, mixed_dataset):
        comparison = BlendComparison(mixed_dataset, blends=(10, 90),
                                     include_entropic=False, n_folds=4)
        comparison.run_comparison()
        best = comparison.get_best()
        assert best.mean_score == max(r.mean_score for r in comparison.results)

    def test_numeric_class_skips_entropic(self, numeric_class_dataset):
        comparison = BlendComparison(numeric_class_dataset, blends=(20, 80), n_folds=5)
        results = comparison.run_comparison()
        assert len(results) == 2
        assert results[0].scoring == 'rmse'
        assert comparison.get_best().mean_score == min(r.mean_score for r in results)

    def test_to_dict(self, yes_no_dataset):
        comparison = BlendComparison(yes_no_dataset, blends=(20,),
                                     include_entropic=False, n_folds=2)
        comparison.run_comparison()
        rows = comparison.to_dict()
        assert rows[0]['label'] == "Blend 20%"
        assert set(rows[0]) >= {'mean_score', 'std_score', 'elapsed'}

    def test_print_results(self, yes_no_dataset, capsys):
        BlendComparison(yes_no_dataset).print_results()
        assert "No results" in capsys.readouterr().out

        compare_blends(yes_no_dataset, blends=(20,), include_entropic=False, n_folds=2)
        out = capsys.readouterr().out
        assert "BLEND COMPARISON" in out
        assert "Best Setting: Blend 20%" in out


def test_generate_mixed_data():
    data = generate_mixed_data(40)
    assert data.num_instances == 40
    assert data.num_classes == 2

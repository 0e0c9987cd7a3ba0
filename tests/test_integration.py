"""
Integration tests for scoregc: real PNG rendering with matplotlib and
value tables written to and read from files.
"""

import matplotlib.image as mpimg
import numpy as np
import pytest

from scoregc import (
    FactorAttributes,
    FactorValues,
    RenderError,
    ScoreRecord,
    ValueTableIO,
    create_config,
    load_value_frame,
    plot_score_vs_gc,
    read_value_table,
    run_plot,
    write_value_table,
)


@pytest.fixture
def jaspar_like_results():
    """Z and Fisher scores for a small set of factors with mixed GC content."""
    rng = np.random.default_rng(11)
    records = []
    attributes = {}
    for i in range(40):
        factor_id = f"MA{i:04d}.1"
        records.append(
            ScoreRecord(
                id=factor_id,
                zscore=float(rng.normal(0, 4)),
                fisher_p_value=float(rng.exponential(3)) if i % 7 else None,
            )
        )
        attributes[factor_id] = FactorAttributes(id=factor_id, name=f"TF{i}", gc_content=float(rng.uniform(0.2, 0.8)))
    return records, attributes


def test_plot_writes_1024_png(jaspar_like_results, temp_dir):
    """Plot is written as a 1024x1024 PNG"""
    records, attributes = jaspar_like_results
    output = temp_dir / "zscore_vs_gc.png"

    request = plot_score_vs_gc(records, attributes, "Z", 2, output)

    assert output.exists()
    image = mpimg.imread(output)
    assert image.shape[:2] == (1024, 1024)
    assert request.y_min < request.score_all.min()
    assert request.y_max > request.score_all.max()


def test_run_plot_with_config(jaspar_like_results, temp_dir):
    """Config driven plotting honours size and skips absent scores"""
    records, attributes = jaspar_like_results
    config = create_config("Fisher", sd_fold=1.5, output_path=temp_dir / "fisher.png", width_px=512, height_px=400)

    request = run_plot(records, attributes, config)

    image = mpimg.imread(temp_dir / "fisher.png")
    assert image.shape[:2] == (400, 512)
    assert request.score_all.size == sum(1 for r in records if r.fisher_p_value is not None)


def test_plot_into_missing_directory_raises_render_error(jaspar_like_results, temp_dir):
    """Engine failures surface as RenderError"""
    records, attributes = jaspar_like_results

    with pytest.raises(RenderError):
        plot_score_vs_gc(records, attributes, "Z", 2, temp_dir / "missing" / "plot.png")


def test_value_table_file_round_trip(temp_dir):
    """Values written to a file read back identically, also via pandas"""
    values = FactorValues([("MA0001.1", 0.873), ("MA0002.1", 12.5), ("MA0001.1", -3.0)])
    path = temp_dir / "values.txt"

    assert write_value_table(values, path) == 3
    assert path.read_text() == "MA0001.1\t0.873\nMA0002.1\t12.5\nMA0001.1\t-3.0\n"

    restored = read_value_table(path)
    assert restored == values
    assert restored.values("MA0001.1") == [0.873, -3.0]

    frame = load_value_frame(path)
    assert list(frame.columns) == ["factor_id", "value"]
    assert frame["factor_id"].tolist() == ["MA0001.1", "MA0002.1", "MA0001.1"]
    np.testing.assert_allclose(frame["value"].to_numpy(), [0.873, 12.5, -3.0])


def test_value_table_append(temp_dir):
    """Append mode adds rows after the existing ones"""
    path = temp_dir / "values.txt"
    write_value_table(FactorValues([("A", 1.0)]), path)
    write_value_table(FactorValues([("B", 2.0)]), path, append=True)

    with ValueTableIO(path=path, mode="r") as table:
        assert list(table.read_rows()) == [("A", 1.0), ("B", 2.0)]


def test_value_table_rewrite_keeps_interleaved_rows(temp_dir):
    """Reading a table and writing it back preserves the row order"""
    source = temp_dir / "source.txt"
    target = temp_dir / "target.txt"
    source.write_text("A\t1.5\nB\t2.25\nA\t3.0\n")

    assert write_value_table(read_value_table(source), target) == 3

    assert target.read_text() == "A\t1.5\nB\t2.25\nA\t3.0\n"


def test_plot_with_infinite_score(temp_dir):
    """An infinite score is drawn on the axis edge without failing the render"""
    records = [ScoreRecord(id=f"F{i}", fisher_p_value=float(i)) for i in range(1, 6)]
    records.append(ScoreRecord(id="F6", fisher_p_value=float("inf")))
    attributes = {r.id: FactorAttributes(id=r.id, name=r.id, gc_content=0.45) for r in records}
    output = temp_dir / "fisher_inf.png"

    request = plot_score_vs_gc(records, attributes, "Fisher", 1, output)

    assert request.has_inf
    assert np.isinf(request.score_above).any()
    assert output.exists()

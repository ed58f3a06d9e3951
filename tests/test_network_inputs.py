"""Unit tests for interaction matrix and phenotype match store inputs."""

import numpy as np
import polars as pl
import pytest
from pydantic import ValidationError

from phenonet_pipeline.network import (
    InteractionMatrix,
    PhenotypeMatchModel,
    PhenotypeMatchStore,
    load_interaction_matrix,
    load_phenotype_matches,
)


@pytest.fixture
def values() -> np.ndarray:
    return np.array([
        [0.0, 0.1, 0.25],
        [0.1, 0.0, 0.4],
        [0.25, 0.4, 0.0],
    ])


# ============================================================================
# InteractionMatrix
# ============================================================================

def test_matrix_lookup(values):
    matrix = InteractionMatrix(values, [1, 2, 3])

    assert matrix.contains_gene(2)
    assert not matrix.contains_gene(4)
    assert matrix.row_index_for_gene(3) == 2
    assert matrix.row_count() == 3
    assert matrix.column_count() == 3
    np.testing.assert_allclose(matrix.column_for_gene(2), [0.1, 0.0, 0.4], rtol=1e-6)


def test_matrix_stores_float32(values):
    matrix = InteractionMatrix(values, [1, 2, 3])

    assert matrix.column_for_gene(1).dtype == np.float32


def test_matrix_is_read_only(values):
    matrix = InteractionMatrix(values, [1, 2, 3])

    with pytest.raises(ValueError):
        matrix.column_for_gene(1)[0] = 5.0


def test_matrix_unknown_gene_index_raises(values):
    matrix = InteractionMatrix(values, [1, 2, 3])

    with pytest.raises(KeyError):
        matrix.row_index_for_gene(42)


def test_empty_matrix():
    assert InteractionMatrix.EMPTY.row_count() == 0
    assert not InteractionMatrix.EMPTY.contains_gene(1)


@pytest.mark.parametrize(
    "bad_values, gene_ids, message",
    [
        (np.zeros((2, 3)), [1, 2], "square"),
        (np.zeros(4), [1, 2, 3, 4], "square"),
        (np.zeros((3, 3)), [1, 2], "Expected 3 gene IDs"),
        (np.zeros((2, 2)), [1, 1], "unique"),
        (np.array([[0.0, np.nan], [np.nan, 0.0]]), [1, 2], "non-finite"),
        (np.array([[0.0, -0.1], [-0.1, 0.0]]), [1, 2], "negative"),
    ],
)
def test_malformed_matrix_rejected(bad_values, gene_ids, message):
    with pytest.raises(ValueError, match=message):
        InteractionMatrix(bad_values, gene_ids)


def test_load_matrix_npz(tmp_path, values):
    path = tmp_path / "matrix.npz"
    np.savez(path, matrix=values, gene_ids=np.array([10, 20, 30]))

    matrix = load_interaction_matrix(path)

    assert matrix.gene_ids == (10, 20, 30)
    assert matrix.row_index_for_gene(30) == 2


def test_load_matrix_npz_missing_array(tmp_path, values):
    path = tmp_path / "matrix.npz"
    np.savez(path, matrix=values)

    with pytest.raises(ValueError, match="gene_ids"):
        load_interaction_matrix(path)


def test_load_matrix_tsv(tmp_path, values):
    path = tmp_path / "matrix.tsv"
    df = pl.DataFrame({"gene_id": [10, 20, 30]}).with_columns([
        pl.Series(str(gene_id), values[:, i]) for i, gene_id in enumerate([10, 20, 30])
    ])
    df.write_csv(path, separator="\t")

    matrix = load_interaction_matrix(path)

    assert matrix.gene_ids == (10, 20, 30)
    np.testing.assert_allclose(matrix.column_for_gene(30), [0.25, 0.4, 0.0], rtol=1e-6)


def test_load_matrix_tsv_float_gene_ids(tmp_path, values):
    path = tmp_path / "matrix.tsv"
    path.write_text(
        "gene_id\t10\t20\t30\n"
        + "".join(
            f"{gene_id}.0\t" + "\t".join(str(v) for v in row) + "\n"
            for gene_id, row in zip([10, 20, 30], values)
        )
    )

    matrix = load_interaction_matrix(path)

    assert matrix.gene_ids == (10, 20, 30)
    assert matrix.row_index_for_gene(20) == 1


def test_load_matrix_tsv_column_order_mismatch(tmp_path, values):
    path = tmp_path / "matrix.tsv"
    pl.DataFrame({
        "gene_id": [10, 20, 30],
        "30": values[:, 2],
        "20": values[:, 1],
        "10": values[:, 0],
    }).write_csv(path, separator="\t")

    with pytest.raises(ValueError, match="same genes"):
        load_interaction_matrix(path)


def test_load_matrix_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_interaction_matrix(tmp_path / "missing.npz")


# ============================================================================
# PhenotypeMatchStore
# ============================================================================

def make_model(gene_id, score, model_id):
    return PhenotypeMatchModel(gene_id=gene_id, gene_symbol=f"GENE{gene_id}", score=score, model_id=model_id)


def test_store_keeps_gene_and_model_order():
    store = PhenotypeMatchStore.from_models([
        make_model(5, 0.4, "a"),
        make_model(2, 0.9, "b"),
        make_model(5, 0.7, "c"),
    ])

    assert store.gene_ids() == [5, 2]
    assert [m.model_id for m in store.models_for_gene(5)] == ["a", "c"]
    assert len(store) == 2
    assert 2 in store


def test_store_unknown_gene_has_no_models():
    store = PhenotypeMatchStore()

    assert store.models_for_gene(1) == ()
    assert store.best_score(1) is None


def test_store_best_score():
    store = PhenotypeMatchStore.from_models([
        make_model(5, 0.4, "a"),
        make_model(5, 0.7, "b"),
    ])

    assert store.best_score(5) == 0.7


def test_negative_phenotype_score_rejected():
    with pytest.raises(ValidationError):
        PhenotypeMatchModel(gene_id=1, gene_symbol="GENE1", score=-0.1)


def test_infinite_phenotype_score_rejected():
    with pytest.raises(ValidationError):
        PhenotypeMatchModel(gene_id=1, gene_symbol="GENE1", score=float("inf"))


def test_store_from_dataframe_missing_column():
    df = pl.DataFrame({"gene_id": [1], "score": [0.5]})

    with pytest.raises(ValueError, match="gene_symbol"):
        PhenotypeMatchStore.from_dataframe(df)


def test_load_phenotype_matches(tmp_path):
    path = tmp_path / "matches.tsv"
    path.write_text(
        "gene_id\tgene_symbol\tscore\tmodel_id\torganism\tdisease_id\tdisease_term\n"
        "4647\tMYO7A\t0.91\tOMIM:276900\thuman\tOMIM:276900\tUsher syndrome type 1B\n"
        "4647\tMYO7A\t0.75\tMGI:104510\tmouse\t\t\n"
        "7399\tUSH2A\t0.88\tOMIM:276901\thuman\tOMIM:276901\tUsher syndrome type 2A\n"
    )

    store = load_phenotype_matches(path)

    assert store.gene_ids() == [4647, 7399]
    models = store.models_for_gene(4647)
    assert [m.organism for m in models] == ["human", "mouse"]
    assert models[0].disease_term == "Usher syndrome type 1B"
    assert models[1].disease_id is None
    assert store.best_score(4647) == 0.91


def test_load_phenotype_matches_required_columns_only(tmp_path):
    path = tmp_path / "matches.tsv"
    path.write_text("gene_id\tgene_symbol\tscore\n2200\tFBN1\t0.66\n")

    store = load_phenotype_matches(path)

    model = store.models_for_gene(2200)[0]
    assert model.gene_symbol == "FBN1"
    assert model.model_id is None


def test_load_phenotype_matches_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_phenotype_matches(tmp_path / "missing.tsv")

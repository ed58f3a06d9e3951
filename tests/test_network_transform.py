"""Tests for batch network scoring, prioritisation and DuckDB loading."""

import numpy as np
import polars as pl
import pytest

from phenonet_pipeline.config.schema import PipelineConfig
from phenonet_pipeline.network import (
    NETWORK_TABLE_NAME,
    InteractionMatrix,
    NetworkScorer,
    PhenotypeMatchModel,
    PhenotypeMatchStore,
    build_scorer,
    load_to_duckdb,
    prioritise_genes,
    query_network_candidates,
    run_network_prioritisation,
    score_network_matches,
)
from phenonet_pipeline.persistence import PipelineStore, ProvenanceTracker


MATRIX_VALUES = np.array([
    [0.0, 0.1, 0.25],
    [0.1, 0.0, 0.4],
    [0.25, 0.4, 0.0],
])


@pytest.fixture
def store() -> PhenotypeMatchStore:
    return PhenotypeMatchStore.from_models([
        PhenotypeMatchModel(gene_id=1, gene_symbol="GENE1", score=0.2),
        PhenotypeMatchModel(gene_id=2, gene_symbol="GENE2", score=0.5),
        PhenotypeMatchModel(gene_id=3, gene_symbol="GENE3", score=0.8),
    ])


@pytest.fixture
def scorer(store) -> NetworkScorer:
    return NetworkScorer.build(InteractionMatrix(MATRIX_VALUES, [1, 2, 3]), store, 0.5)


@pytest.fixture
def config(tmp_path) -> PipelineConfig:
    matrix_path = tmp_path / "data" / "matrix.npz"
    matrix_path.parent.mkdir(parents=True)
    np.savez(matrix_path, matrix=MATRIX_VALUES, gene_ids=np.array([1, 2, 3]))

    matches_path = tmp_path / "data" / "matches.tsv"
    matches_path.write_text(
        "gene_id\tgene_symbol\tscore\n"
        "1\tGENE1\t0.2\n"
        "2\tGENE2\t0.5\n"
        "3\tGENE3\t0.8\n"
    )

    return PipelineConfig(
        data_dir=tmp_path / "data",
        output_dir=tmp_path / "results",
        duckdb_path=tmp_path / "test.duckdb",
        interaction_matrix_path=matrix_path,
        phenotype_matches_path=matches_path,
    )


def test_score_network_matches_rows(scorer):
    df = score_network_matches(scorer, [1, 3, 99])

    assert df["query_gene_id"].to_list() == [1, 3, 99]
    assert df["match_gene_id"].to_list() == [3, None, None]
    assert df["match_gene_symbol"].to_list() == ["GENE3", None, None]
    assert df["walker_score"][0] == pytest.approx(0.7)
    assert df["walker_score"][1] is None
    assert df["match_model_count"].to_list() == [1, 0, 0]


def test_score_network_matches_empty(scorer):
    df = score_network_matches(scorer, [])

    assert df.height == 0
    assert "walker_score" in df.columns


def test_prioritise_genes_combines_evidence(scorer, store):
    df = prioritise_genes(scorer, store, [1, 2, 3, 99])

    assert df["gene_id"].to_list() == [2, 3, 1, 99]
    assert df["evidence_source"].to_list() == ["network", "phenotype", "network", "none"]

    by_gene = {row["gene_id"]: row for row in df.iter_rows(named=True)}
    assert by_gene[2]["priority_score"] == pytest.approx(0.82)
    assert by_gene[3]["priority_score"] == 0.8
    assert by_gene[3]["network_score"] is None
    assert by_gene[1]["phenotype_score"] == 0.2
    assert by_gene[1]["network_match_gene_symbol"] == "GENE3"
    assert by_gene[99]["priority_score"] is None
    assert by_gene[99]["gene_symbol"] is None


def test_prioritise_genes_deduplicates(scorer, store):
    df = prioritise_genes(scorer, store, [1, 1, 3])

    assert sorted(df["gene_id"].to_list()) == [1, 3]


def test_prioritise_genes_with_empty_scorer(store):
    df = prioritise_genes(NetworkScorer.EMPTY, store, [1, 2, 3])

    assert set(df["evidence_source"].to_list()) == {"phenotype"}
    assert df["network_score"].null_count() == 3


def test_build_scorer_without_matrix_is_empty(config, store):
    config = config.model_copy(update={"interaction_matrix_path": None})

    assert build_scorer(config, store) is NetworkScorer.EMPTY


def test_run_network_prioritisation(config):
    df = run_network_prioritisation(config)

    assert df.height == 3
    assert df["gene_id"].to_list() == [2, 3, 1]


def test_run_network_prioritisation_selected_genes(config):
    df = run_network_prioritisation(config, [1])

    assert df["gene_id"].to_list() == [1]
    assert df["network_match_gene_id"][0] == 3


def test_load_to_duckdb_and_query(tmp_path, config, scorer, store):
    df = prioritise_genes(scorer, store, [1, 2, 3])
    provenance = ProvenanceTracker.from_config(config)

    with PipelineStore(tmp_path / "results.duckdb") as db:
        load_to_duckdb(df, db, provenance)

        assert db.has_checkpoint(NETWORK_TABLE_NAME, provenance.checkpoint_key)
        assert provenance.processing_steps[-1]["step_name"] == "load_network_prioritised_genes"

        candidates = query_network_candidates(db, min_score=0.75)
        assert candidates["gene_id"].to_list() == [2]


def test_query_network_candidates_without_table(tmp_path):
    with PipelineStore(tmp_path / "empty.duckdb") as db:
        with pytest.raises(ValueError, match=NETWORK_TABLE_NAME):
            query_network_candidates(db)

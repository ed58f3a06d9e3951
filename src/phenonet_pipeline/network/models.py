"""Data models for phenotype-weighted network evidence."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# Table name for DuckDB storage
NETWORK_TABLE_NAME = "network_prioritised_genes"

# Fixed calibration offset letting network evidence compete with weak
# direct phenotype scores
WALKER_SCORE_OFFSET = 0.5


class PhenotypeMatchModel(BaseModel):
    """One phenotype match between a gene and a disease or organism model.

    Attributes:
        gene_id: Entrez gene ID shared with the interaction matrix
        gene_symbol: Human gene symbol
        score: Phenotype similarity score (>= 0)
        model_id: Identifier of the matched model (disease or organism gene)
        organism: Source organism of the model (human/mouse/fish)
        disease_id: Originating disease identifier, if any
        disease_term: Originating disease name, if any
    """

    model_config = ConfigDict(frozen=True)

    gene_id: int = Field(..., description="Entrez gene ID")
    gene_symbol: str = Field(..., description="Human gene symbol")
    score: float = Field(
        ...,
        ge=0.0,
        allow_inf_nan=False,
        description="Phenotype similarity score",
    )

    model_id: Optional[str] = Field(None, description="Matched model identifier")
    organism: Optional[str] = Field(None, description="Model organism")
    disease_id: Optional[str] = Field(None, description="Disease identifier")
    disease_term: Optional[str] = Field(None, description="Disease name")


class GeneMatch(BaseModel):
    """Best network-supported phenotype match for a query gene.

    ``match_gene_id`` is None for the NO_HIT result.
    """

    model_config = ConfigDict(frozen=True)

    query_gene_id: Optional[int] = None
    match_gene_id: Optional[int] = None
    score: float = 0.0
    best_match_models: tuple[PhenotypeMatchModel, ...] = ()

    @property
    def is_hit(self) -> bool:
        return self.match_gene_id is not None


NO_HIT = GeneMatch()

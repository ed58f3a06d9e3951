"""Output generation: prioritised gene tables in one or more file formats."""

from phenonet_pipeline.output.writers import (
    OutputFormat,
    get_results_writer,
    write_results,
)

__all__ = [
    "OutputFormat",
    "get_results_writer",
    "write_results",
]

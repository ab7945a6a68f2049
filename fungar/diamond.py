import logging
import shutil
import subprocess

from fungar import configuration
from fungar.errors import DependencyError
from fungar.globals import ALIGNMENT_FIELDS

logger = logging.getLogger(__name__)


def check_dependencies(executable="diamond"):
    path = shutil.which(executable)
    if path is None:
        raise DependencyError("{} not found in PATH".format(executable))
    return path


def diamond_command(query, output, protein_db, cpus=configuration.CPUS, min_orf=configuration.MIN_ORF,
                    genetic_code=configuration.GENETIC_CODE, min_query_cover=configuration.MIN_QUERY_COVER,
                    min_pident=configuration.MIN_PIDENT, executable="diamond"):
    return [
        executable, "blastx",
        "-d", protein_db,
        "-q", query,
        "-o", output,
        "--threads", str(cpus),
        "--min-orf", str(min_orf),
        "--query-gencode", str(genetic_code),
        "--outfmt", "6", *ALIGNMENT_FIELDS,
        "--strand", "both",
        "--query-cover", str(min_query_cover),
        "--id", str(min_pident),
        "--masking", "0",
    ]


def run_diamond(query, output, protein_db, label, log_path, **kwargs):
    """
    Translate-align *query* reads against the species protein database with DIAMOND blastx.

    Args:
        query: Path to the reads (FASTQ/FASTA, optionally gzipped)
        output: Path of the tabular alignment file to write
        protein_db: Path to the .dmnd database
        label: Read label used in log messages, e.g. R1
        log_path: DIAMOND's stderr is appended to this file
        **kwargs: Passed on to diamond_command (cpus, min_orf, genetic_code, min_query_cover, min_pident)
    """
    cmd = diamond_command(query, output, protein_db, **kwargs)
    logger.info("Running DIAMOND on {} reads...".format(label))
    logger.debug(" ".join(cmd))
    with open(log_path, "a") as log_file:
        result = subprocess.run(cmd, stdout=subprocess.DEVNULL, stderr=log_file)
    if result.returncode != 0:
        raise DependencyError("DIAMOND failed on {} reads (exit status {})".format(label, result.returncode))
    return output

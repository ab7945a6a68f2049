"""
FUNGAR: antiFUNGAl gene Resistance detection.

Aligns reads to a species protein database with DIAMOND blastx and reports the cataloged resistance mutations
observed in each read, plus the number of reads supporting each mutation.
"""

import argparse
import logging
import os
import sys
from datetime import datetime

from fungar import __version__, configuration
from fungar.aggregate import aggregate, write_tables
from fungar.catalog import load_catalog
from fungar.database import check_file, resolve_database_dir, species_files
from fungar.diamond import check_dependencies, run_diamond
from fungar.errors import FungarError, InputError
from fungar.globals import PAIRED_LABELS, SINGLE_LABELS
from fungar.plot import plot_support
from fungar.refiner import Filters
from fungar.scanner import Scanner

logger = logging.getLogger("fungar")


def setup_logging(log_file, log_level=logging.INFO):
    """ Log to *log_file* (truncated first) and to stdout. DIAMOND appends its own stderr to the same file. """
    logger.setLevel(log_level)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S")

    open(log_file, "w").close()
    file_handler = logging.FileHandler(log_file, mode="a")
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
    return logger


def input_streams(r1=None, r2=None, se=None):
    """ Returns [(reads_path, label), ...] for the chosen input mode, raising InputError on a bad combination """
    paired = r1 is not None or r2 is not None
    if paired and se is not None:
        raise InputError("Use either -1/-2 (paired) or -s (single), not both")
    if paired:
        if r1 is None or r2 is None:
            raise InputError("Paired-end mode requires both -1 and -2 arguments")
        return list(zip((r1, r2), PAIRED_LABELS))
    if se is None:
        raise InputError("No input files specified. Must use either -1/-2 (paired) or -s (single)")
    return list(zip((se,), SINGLE_LABELS))


def log_parameters(params):
    logger.info("FUNGAR v{}: antiFUNGAl gene Resistance detection".format(__version__))
    logger.info("Started: {}".format(datetime.now().strftime("%Y-%m-%d %H:%M:%S")))
    for key, value in params.items():
        logger.info("- {}: {}".format(key, value))


def run_pipeline(sample, species, outdir, r1=None, r2=None, se=None, database_dir=None, cpus=configuration.CPUS,
                 min_orf=configuration.MIN_ORF, genetic_code=configuration.GENETIC_CODE,
                 min_query_cover=configuration.MIN_QUERY_COVER, min_pident=configuration.MIN_PIDENT,
                 keep=configuration.KEEP_FILES, plot=False, log_level=logging.INFO):
    """
    Run the whole detection for one sample and return the (results, summary) data frames.

    Writes <sample>_results.csv, <sample>_summary.csv and FUNGAR.<sample>.log to *outdir*, plus
    <sample>_support.pdf when *plot* is set. Alignment files are deleted at the end unless *keep* is set.
    """
    streams = input_streams(r1, r2, se)
    os.makedirs(outdir, exist_ok=True)
    log_path = os.path.join(outdir, "FUNGAR.{}.log".format(sample))
    setup_logging(log_path, log_level)

    database_dir = resolve_database_dir(database_dir)
    log_parameters({
        "Sample": sample, "Species": species, "Database directory": database_dir,
        "Input mode": "paired" if len(streams) == 2 else "single",
        **{label: path for path, label in streams},
        "CPUs": cpus, "Minimum ORF length": min_orf, "Genetic code": genetic_code,
        "Minimum query cover": min_query_cover, "Minimum identity": min_pident, "Keep intermediates": keep,
    })

    logger.info("Verifying input files...")
    for path, _ in streams:
        check_file(path)
    protein_db, catalog_path = species_files(database_dir, species)
    check_dependencies()

    alignments = []
    for reads, label in streams:
        aln = os.path.join(outdir, "{}_{}.aln".format(sample, label))
        run_diamond(reads, aln, protein_db, "single-end" if label == "SE" else label, log_path, cpus=cpus,
                    min_orf=min_orf, genetic_code=genetic_code, min_query_cover=min_query_cover,
                    min_pident=min_pident)
        alignments.append((aln, label))

    logger.info("Detecting resistance mutations...")
    catalog = load_catalog(catalog_path)
    scanner = Scanner(catalog, filters=Filters(min_pident=min_pident))
    findings = []
    for aln, label in alignments:
        findings.extend(scanner.scan_file(aln, label))
    logger.info("Scanned {records} alignment records: {malformed} malformed, {filtered} filtered, "
                "{unmatched_gene} without cataloged gene, {findings} findings".format(**scanner.stats()))

    results, summary = aggregate(findings)
    results_path = os.path.join(outdir, "{}_results.csv".format(sample))
    summary_path = os.path.join(outdir, "{}_summary.csv".format(sample))
    write_tables(results, summary, results_path, summary_path)

    if plot:
        figure = plot_support(summary, os.path.join(outdir, "{}_support.pdf".format(sample)),
                              title="{} resistance mutation support".format(sample))
        if figure is None:
            logger.info("No findings, support plot skipped")

    if not keep:
        logger.info("Cleaning up intermediate files...")
        for aln, _ in alignments:
            if os.path.exists(aln):
                os.remove(aln)
    else:
        logger.info("Keeping intermediate files (--keep flag used)")

    logger.info("Analysis complete for sample {}".format(sample))
    logger.info("Final results saved to: {}".format(results_path))
    logger.info("Summary results saved to: {}".format(summary_path))
    return results, summary


def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        prog="fungar",
        description="FUNGAR v{}: pipeline for antiFUNGAl gene Resistance detection".format(__version__),
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("-id", "--sample", required=True, help="Sample ID (e.g., patient123)")
    parser.add_argument("-sp", "--species", required=True, help="Species name (e.g., Candida_albicans)")
    parser.add_argument("-o", "--outdir", required=True, help="Output directory")

    reads = parser.add_argument_group("input options (choose one mode)")
    reads.add_argument("-1", dest="r1", help="Forward reads (R1.fastq.gz) - for paired-end mode")
    reads.add_argument("-2", dest="r2", help="Reverse reads (R2.fastq.gz) - for paired-end mode")
    reads.add_argument("-s", dest="se", help="Single-end reads (SE.fastq.gz)")

    parser.add_argument("-d", dest="database_dir", default=None,
                        help="Directory containing protein DB + mutation CSV "
                             "(default: $FUNGAR_DB, then $CONDA_PREFIX/share/FUNGAR, then ./database)")
    parser.add_argument("-c", dest="cpus", type=int, default=configuration.CPUS, help="CPU threads")
    parser.add_argument("-orf", dest="min_orf", type=int, default=configuration.MIN_ORF,
                        help="Minimum ORF length")
    parser.add_argument("-code", dest="genetic_code", type=int, default=configuration.GENETIC_CODE,
                        help="Genetic code table for translation")
    parser.add_argument("--min-query-cover", type=int, default=configuration.MIN_QUERY_COVER,
                        help="Minimum query coverage %%")
    parser.add_argument("--min-pident", type=int, default=configuration.MIN_PIDENT, help="Minimum %% identity")
    parser.add_argument("--keep", action="store_true", help="Keep intermediate alignment files")
    parser.add_argument("--plot", action="store_true", help="Draw a PDF bar chart of supporting reads")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_arguments(argv)
    try:
        run_pipeline(args.sample, args.species, args.outdir, r1=args.r1, r2=args.r2, se=args.se,
                     database_dir=args.database_dir, cpus=args.cpus, min_orf=args.min_orf,
                     genetic_code=args.genetic_code, min_query_cover=args.min_query_cover,
                     min_pident=args.min_pident, keep=args.keep, plot=args.plot,
                     log_level=getattr(logging, args.log_level))
    except FungarError as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

CPUS = 4
MIN_ORF = 50
MIN_QUERY_COVER = 10
MIN_PIDENT = 0
#: Minimum alignment length (residues) applied by the scanner after alignment.
MIN_LENGTH = 0
GENETIC_CODE = 1
KEEP_FILES = False

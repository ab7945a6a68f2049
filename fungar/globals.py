#: DIAMOND --outfmt 6 columns, in the order the aligner writes them.
ALIGNMENT_FIELDS = [
    "qseqid", "sseqid", "pident", "length", "mismatch", "gapopen",
    "qstart", "qend", "sstart", "send", "evalue", "bitscore",
    "qseq_translated", "sseq"
]
MIN_ALIGNMENT_FIELDS = 13

CATALOG_REQUIRED = ["gene", "position", "reference", "mutation"]
#: Accepted names for the compound column, first match wins.
COMPOUND_ALIASES = ["fungicide", "compound", "drug", "antifungal"]

RESULT_COLS = ["Sample", "Gene", "Position", "Reference", "Mutation", "Fungicide", "Read"]
SUMMARY_COLS = ["Gene", "Position", "Reference", "Mutation", "Fungicide", "Support_Reads"]
DEDUP_KEY = ["Sample", "Gene", "Position", "Mutation"]

#: Read labels for each input mode.
PAIRED_LABELS = ("R1", "R2")
SINGLE_LABELS = ("SE",)

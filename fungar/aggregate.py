from collections import Counter

import pandas as pd

from fungar.globals import DEDUP_KEY, RESULT_COLS, SUMMARY_COLS


def findings_to_df(findings):
    return pd.DataFrame([list(f) for f in findings], columns=RESULT_COLS)


def deduplicate(findings):
    """ Per-read results: one row per (Sample, Gene, Position, Mutation), keeping the first one seen.

    Reference, Fungicide and Read are carried along but do not take part in the uniqueness test. """
    df = findings if isinstance(findings, pd.DataFrame) else findings_to_df(findings)
    return df.drop_duplicates(subset=DEDUP_KEY, keep="first").reset_index(drop=True)


def count_support(findings):
    """ Counts every finding, duplicates included, per (Gene, Position, Reference, Mutation, Fungicide).

    A mutation seen in both mates of a fragment is supported by two reads. """
    counter = Counter()
    for f in findings:
        counter[(f.gene, f.position, f.reference, f.mutation, f.compound)] += 1
    return pd.DataFrame([list(k) + [v] for k, v in counter.items()], columns=SUMMARY_COLS)


def aggregate(findings):
    """
    Returns the (results, summary) pair of data frames for a sequence of scanner.Finding tuples.

    Both frames always carry their full header, even when there are no findings.
    """
    findings = list(findings)
    return deduplicate(findings), count_support(findings)


def write_tables(results, summary, results_path, summary_path):
    results.to_csv(results_path, index=False)
    summary.to_csv(summary_path, index=False)
    return results_path, summary_path

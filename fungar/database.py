import os

from fungar.errors import InputError


def resolve_database_dir(database_dir=None, environ=None):
    """
    Directory holding the species protein databases and mutation catalogs.

    Priority: the explicit argument, the FUNGAR_DB environment variable, $CONDA_PREFIX/share/FUNGAR, and finally
    a relative 'database' directory.
    """
    if environ is None:
        environ = os.environ
    if database_dir:
        return database_dir
    if environ.get("FUNGAR_DB"):
        return environ["FUNGAR_DB"]
    if environ.get("CONDA_PREFIX"):
        return os.path.join(environ["CONDA_PREFIX"], "share", "FUNGAR")
    return "database"


def species_files(database_dir, species):
    """ Returns (protein_db, mutation_catalog) paths for *species*, raising InputError if either is missing """
    protein_db = os.path.join(database_dir, "{}_db.dmnd".format(species))
    catalog = os.path.join(database_dir, "{}_gene_mutations.csv".format(species))
    for path in (protein_db, catalog):
        check_file(path)
    return protein_db, catalog


def check_file(path):
    if not os.path.isfile(path):
        raise InputError("File not found - {}".format(path))
    return path

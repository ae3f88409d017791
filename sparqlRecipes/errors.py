"""Exception hierarchy shared by the Fedora and Fuseki clients."""


class SparqlRecipesError(Exception):
    """Base class for errors raised while driving Fedora or Fuseki."""

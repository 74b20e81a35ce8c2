"""javadeps: heuristic transitive dependency discovery for Java source trees."""

__version__ = "0.1.0"

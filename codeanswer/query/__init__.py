from .parser import ParsedQuery, parse_nl  # noqa: F401

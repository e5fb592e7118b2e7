"""Allow ``python -m gocover_cobertura``."""

from gocover_cobertura.cli import main

main()

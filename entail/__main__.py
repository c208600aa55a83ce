"""Allow ``python -m entail``."""

from entail.main import main

main()

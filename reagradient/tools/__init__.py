"""reagradient.tools package

Standalone entry points (`python -m reagradient.tools.<name>`) besides the
main `reagradient` CLI. No eager imports here.
"""

__all__: list[str] = []

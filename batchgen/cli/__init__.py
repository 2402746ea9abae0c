"""Command line interface for batchgen.

* :mod:`batchgen.cli.args` builds the parser.
* :mod:`batchgen.cli.main` dispatches the ``srt`` and ``split`` commands and
  maps configuration errors to exit codes.
"""

from . import args

__all__ = ["args"]

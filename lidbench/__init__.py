# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
lidbench: fastText language identification with a Tatoeba accuracy benchmark.

Subpackages:
  - detection: the predict API (classifier service, formatter, registry)
  - benchmark: corpus loading, bounded prediction pools, ranked reports
  - config, logging, runtime, utils, cli: the plumbing around both
"""

__version__ = "0.3.0"

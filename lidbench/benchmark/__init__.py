# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Language identification benchmark.

Subsystems:
  - corpus: reading and sampling per-language Tatoeba sentence files
  - pool: bounded-concurrency execution of async work items
  - orchestrator: load, predict and count per language
  - report: ranking results and writing the run's artifacts
"""

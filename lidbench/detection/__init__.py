# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Language detection on top of a fastText identification model.

Subsystems:
  - classifier: the model service, loaded once and shared read-only
  - formatter: makes text safe for single-line feature extraction
  - adapter: normalized ranked labels and top-1 lookups
  - registry: corpus code to canonical code and display name mapping
  - api: the LanguageDetector predict API
"""

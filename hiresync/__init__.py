"""hiresync - hh.ru recruitment sync and refusal delivery."""

"""Summarization Toolkit — command-line helpers for LLM transcript summaries.

WHY: Local LLM servers have small context windows. Summarizing a long
transcript means converting subtitles to plain text, cutting the text into
prompt-sized parts, sending each part to the model, and stitching the
answers back together. Each of those steps is a small tool here.

HOW: Four tools plus a driver that chains them:
  srt        — .srt subtitles → annotated "Script:/Start Time:/End Time:" text
  split      — annotated text → token-bounded parts wrapped in a prompt
  summarize  — directory of parts → JSON map of model responses
  merge      — JSON map → one text file
  pipeline   — srt → split → summarize → merge → single-shot → summarize → merge

RULES:
- Splitting is planned in memory first; files are written only after the
  config and the whole plan are ready
- All HTTP goes through api.client.SummarizationClient
- Backend differences live in request adapters, not in the client
"""

__version__ = "0.1.0"

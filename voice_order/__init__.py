"""
Voice Order Engine
==================

Turns noisy speech-to-text transcripts of menu requests into safe cart
operations:

- **matching**: multi-signal fuzzy resolution with reject / suggest /
  ambiguous / match gates
- **dietary**: allergy validation from enrichment tags plus a static risk table
- **enrichment**: background AI enrichment of catalog items, merged back on read
- **vocabulary**: keyword bias list for the speech recognizer
- **ordering**: the session-level cart boundary tying the above together
"""

"""
Soundgrid

A shared library of generated songs. Viewers browse their own songs and
everyone's published ones, open a song's details, and play or download it,
with one now-playing track per viewer session. Media lives in S3-compatible
storage (Cloudflare R2, AWS S3, generic S3) or a local directory and is
served through short-lived signed URLs.

Repository Structure:
- library/: visibility, projection, per-song playback, sessions and CLI
- storage/: URL signers for storage keys and the async resolver
- shared/: models, configuration, playback store and the API server
- tests/: Unit and integration tests

License: MIT
"""

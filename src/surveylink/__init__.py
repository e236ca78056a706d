"""
surveylink: surveys shared as self-contained links.

A survey and the endpoint that collects its answers are packed into the
query string of a URL. Opening that URL fills the survey and posts the
answer to the endpoint; without one, an authoring session builds and
previews the survey and keeps responses locally for CSV export.

Layers:
    model           survey, question and answer types
    serialization   dict/JSON/YAML forms
    share_link      link encoding and decoding
    capture         one in-progress response
    export          CSV rendering
    submission      fire-and-forget remote delivery
    session         AUTHOR / FILL state machine
"""

__version__ = "0.1.0"

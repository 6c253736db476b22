"""
version-sync — propagate one version string across a project's manifests.

The authority file (package.json by default) holds the canonical version.
Every configured target is rewritten to match it:

  json:  the top-level "version" field of a JSON document
  text:  the first line matching  version = "<value>"  (e.g. Cargo.toml)
"""

__version__ = "1.0.0"

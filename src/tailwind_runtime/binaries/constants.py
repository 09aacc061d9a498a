"""Release hosting and API constants."""

# GitHub API URL structure
GITHUB_API_BASE = "https://api.github.com"
GITHUB_REPOS_PATH = "repos"
RELEASES_PATH = "releases"
LATEST_PATH = "latest"

# Tailwind repository constants
TAILWIND_OWNER = "tailwindlabs"
TAILWIND_REPO = "tailwindcss"
TAILWIND_DOWNLOAD_BASE = f"https://github.com/{TAILWIND_OWNER}/{TAILWIND_REPO}/releases/download"

VERSION_PREFIX = "v"
CHECKSUM_MANIFEST = "sha256sums.txt"
LATEST_RECORD = "latest.json"
ARTIFACT_PREFIX = "tailwindcss"

USER_AGENT = "tailwind-runtime/0.1.0"
CHUNK_SIZE = 65536

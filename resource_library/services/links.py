"""Link builders for catalog resources.

Pure functions mapping a repository-relative path to GitHub view and raw
download URLs.  Each path segment is percent-encoded on its own so that
paths with spaces or non-ASCII characters still produce valid URLs while
keeping the slash separators.
"""

from dataclasses import dataclass
from urllib.parse import quote

# Extensions served as raw content (browser download / inline preview)
# instead of GitHub's text blob view.
BINARY_EXTENSIONS: tuple[str, ...] = (
    ".png",
    ".jpg",
    ".jpeg",
    ".gif",
    ".webp",
    ".pdf",
    ".zip",
    ".pptx",
    ".docx",
    ".xlsx",
    ".mov",
    ".mp4",
    ".mp3",
    ".wav",
    ".avi",
    ".mkv",
)

DEFAULT_WEB_URL = "https://github.com"
DEFAULT_RAW_URL = "https://raw.githubusercontent.com"


def is_binary(path: str) -> bool:
    """Return True if the path ends with a known binary extension (case-insensitive)."""
    return path.lower().endswith(BINARY_EXTENSIONS)


def encode_path(path: str) -> str:
    """Percent-encode each slash-delimited segment, preserving the slashes."""
    return "/".join(quote(segment, safe="") for segment in str(path).split("/"))


@dataclass(frozen=True)
class LinkBuilder:
    """Builds GitHub URLs for one repository at one branch."""

    owner: str
    repo: str
    branch: str
    web_url: str = DEFAULT_WEB_URL
    raw_url: str = DEFAULT_RAW_URL

    @property
    def repo_url(self) -> str:
        return f"{self.web_url.rstrip('/')}/{self.owner}/{self.repo}"

    def build_view_url(self, path: str) -> str:
        """Human-viewable GitHub blob page for *path*."""
        return f"{self.repo_url}/blob/{quote(self.branch, safe='')}/{encode_path(path)}"

    def build_raw_url(self, path: str) -> str:
        """Direct raw-content URL for *path*."""
        return (
            f"{self.raw_url.rstrip('/')}/{self.owner}/{self.repo}/"
            f"{quote(self.branch, safe='')}/{encode_path(path)}"
        )

    def build_download_url(self, path: str) -> str:
        """Raw URL for binary files, blob page for everything else."""
        return self.build_raw_url(path) if is_binary(path) else self.build_view_url(path)

    def download_label(self, path: str) -> str:
        return "Download" if is_binary(path) else "View Raw"


def share_text(name: str) -> str:
    return f"Resource: {name}"


def email_template(name: str, download_url: str) -> tuple[str, str]:
    """Return the fixed (subject, body) pair used for emailing a resource."""
    subject = f"Resource: {name}"
    body = f"Hi,\n\nHere's a resource you might find helpful:\n{download_url}\n\n"
    return subject, body

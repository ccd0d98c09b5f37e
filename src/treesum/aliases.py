from treesum.core.models import OutputMode
from treesum.core.hasher import ALGORITHMS

OUTPUT_MODE_ALIASES = {
    "aggregate": OutputMode.AGGREGATE,
    "single": OutputMode.AGGREGATE,
    "per-directory": OutputMode.PER_DIRECTORY,
    "dir": OutputMode.PER_DIRECTORY,
    "per-file": OutputMode.PER_FILE,
    "split": OutputMode.PER_FILE,
}

OUTPUT_MODE_CHOICES = list(OUTPUT_MODE_ALIASES.keys())

OUTPUT_MODE_HELP_TEXT = (
    "How checksums are grouped into manifest files:\n"
    "  aggregate, single    : one file named after the search path\n"
    "                         (an existing one is renamed to *_<seconds>.bak)\n"
    "  per-directory, dir   : one file per <grandparent>_<parent> directory pair\n"
    "  per-file, split      : one file per containing directory, full path flattened\n"
    "Per-directory and per-file manifests are appended to across runs.\n"
    "Default: aggregate"
)

ALGORITHM_CHOICES = sorted(ALGORITHMS.keys())

ALGORITHM_HELP_TEXT = (
    "Digest algorithm, also used as the manifest extension.\n"
    f"  {', '.join(ALGORITHM_CHOICES)}. Default: md5"
)

USAGE_TEXT = """Usage:
\t%(prog)s [search_path] [save_path] [file_extension] [tag]

\tOnly the first parameter is required. Set file_extension to "**" to search all files.
\tGiven one parameter the remaining defaults are assumed:
\tsave_path="%(save_path)s"
\tfile_extension="**"
\ttag=""
"""

EPILOG_TEXT = """
Examples:
  Checksum every file under /data/set into /out/data-set.md5
  %(prog)s /data/set /out

  Only .flac files, one manifest per album directory, tagged v1
  %(prog)s ~/Music /out flac v1 --mode per-directory

  One manifest per directory, binary mode markers, hashing with 4 threads
  %(prog)s /srv/archive /out "**" --mode per-file --binary --jobs 4

  Start per-directory manifests over (old ones go to the trash)
  %(prog)s ~/Music /out flac v1 --mode dir --clear
"""

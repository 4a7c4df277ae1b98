"""Message templates for the run report."""

REPORT_HEADER = """
# Cluster Backup Report
"""

REPORT_SECTION_CAPTURE = """
## Capture
Namespaces: {namespaces}

Files written: {original} original, {modified} modified

Failures: {failure_count}
"""

REPORT_SECTION_FAILURES = """
### Failed steps
{failures}
"""

REPORT_SECTION_ARCHIVE = """
## Archive
{archive}
"""

REPORT_SECTION_UPLOAD = """
## Upload
{upload}
"""

REPORT_UPLOAD_SKIPPED = "Skipped ({reason})."

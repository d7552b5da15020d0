# Version constants. Single authoritative definition.
# Referenced by the command line help and by report records.

TOOL_VERSION: str = "0.1.0"

# Format version of JSON report records. A change to the record layout
# requires an increment.
REPORT_FORMAT_VERSION: str = "1.0.0"

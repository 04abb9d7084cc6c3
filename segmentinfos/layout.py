"""
Lucene Commit Metadata Layout
=============================

Commit record (segments / segments_N), big-endian unless noted:
    u32    magic                  <- CODEC_MAGIC, identifies a framed file
    string codec                  <- "segments"
    u32    format version         <- SEGMENTS_VERSION_START..SEGMENTS_VERSION_CURRENT
    16B    commit id              <- stamped once when the index is created
    u8+B   suffix                 <- generation as decimal text ("" for generation 0)
    vint*3 lucene version         <- version that wrote this commit
    vint   index created major    <- major version that created the index
    u64    commit version         <- bumped on every commit
    vlong  counter                <- segment name allocator
    u32    segment count
    vint*3 min segment version    <- only present when segment count > 0
    <segment count> x segment entry
    map    user data
    footer                        <- FOOTER_LENGTH bytes, not verified here

Segment entry:
    string name | 16B id | string codec
    i64 del gen | u32 del count | i64 field infos gen | i64 dv gen
    u32 soft del count
    u8 marker (+16B sci id)       <- only when format version > SEGMENTS_VERSION_START
    set field info files
    u32 dv field count, then per field: u32 field number + set of files

Segment descriptor (<name>.si):
    header (magic, "Lucene90SegmentInfo", version, 16B id, empty suffix)
    u32le*3 version | u8 has min version (+u32le*3) | u32le doc count
    u8 compound | map diagnostics | set files | map attributes | list sort fields

Strings are a vint byte length followed by UTF-8. Maps, sets and lists are a
vint count followed by that many strings (pairs of strings for maps).
"""

# Header framing
CODEC_MAGIC = 0x3FD76C17
ID_LENGTH = 16
FOOTER_LENGTH = 16

# Commit record
SEGMENTS_FILE_NAME = "segments"
SEGMENTS_CODEC = "segments"
SEGMENTS_VERSION_START = 9
SEGMENTS_VERSION_CURRENT = 10
GENERATION_SEPARATOR = "_"

# Oldest index-created major version this reader accepts
MIN_SUPPORTED_MAJOR = 9

# Segment descriptor
SI_EXTENSION = "si"
SI_CODEC = "Lucene90SegmentInfo"
SI_VERSION_START = 0
SI_VERSION_CURRENT = SI_VERSION_START

# Varint byte caps
MAX_VINT_BYTES = 5
MAX_VLONG_BYTES = 10

# Generation counters use -1 for "nothing written yet"
NO_GENERATION = -1

# Compound flag; writers store -1 for "no"
SEGMENT_YES = 1

# Codec names whose segment descriptors use the Lucene90 .si layout
LUCENE90_FAMILY_CODECS = (
    "Lucene90",
    "Lucene91",
    "Lucene92",
    "Lucene94",
    "Lucene95",
    "Lucene99",
    "Lucene912",
    "Lucene100",
    "Lucene101",
)

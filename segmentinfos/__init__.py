"""
segmentinfos - Read-only decoder for Lucene commit metadata.

    from segmentinfos import read_latest_commit

    snapshot = read_latest_commit("/var/lib/index")
    if snapshot is None:
        print("empty index")
    else:
        for sci in snapshot:
            print(sci.name, sci.info.doc_count, sci.del_count)
"""

from segmentinfos.config import DecoderConfig, load_config_file
from segmentinfos.cursor import ByteCursor
from segmentinfos.directory import Directory, FSDirectory, MemoryDirectory, find_index_dir
from segmentinfos.errors import (
    BadHeaderId,
    BadHeaderSuffix,
    CodecMismatch,
    CorruptedIndex,
    CorruptFileName,
    CorruptSegment,
    HeaderError,
    IndexFileNotFound,
    IndexFileTooLarge,
    IndexFormatTooNew,
    IndexFormatTooOld,
    InvalidEncoding,
    MagicMismatch,
    MalformedCodecName,
    SegmentInfosError,
    UnexpectedEof,
    VarIntOverflow,
    VersionTooNew,
    VersionTooOld,
)
from segmentinfos.models import CommitSnapshot, SegmentCommitInfo, SegmentInfo, Version
from segmentinfos.reader import (
    SegmentInfosReader,
    file_name_from_generation,
    generation_from_file_name,
    last_commit_generation,
    read_commit,
    read_latest_commit,
)
from segmentinfos.segment_info import (
    Lucene90SegmentInfoFormat,
    SegmentInfoFormat,
    SegmentInfoFormatRegistry,
    default_registry,
)

__version__ = "0.1.0"

__all__ = [
    "BadHeaderId",
    "BadHeaderSuffix",
    "ByteCursor",
    "CodecMismatch",
    "CommitSnapshot",
    "CorruptFileName",
    "CorruptSegment",
    "CorruptedIndex",
    "DecoderConfig",
    "Directory",
    "FSDirectory",
    "HeaderError",
    "IndexFileNotFound",
    "IndexFileTooLarge",
    "IndexFormatTooNew",
    "IndexFormatTooOld",
    "InvalidEncoding",
    "Lucene90SegmentInfoFormat",
    "MagicMismatch",
    "MalformedCodecName",
    "MemoryDirectory",
    "SegmentCommitInfo",
    "SegmentInfo",
    "SegmentInfoFormat",
    "SegmentInfoFormatRegistry",
    "SegmentInfosError",
    "SegmentInfosReader",
    "UnexpectedEof",
    "VarIntOverflow",
    "Version",
    "VersionTooNew",
    "VersionTooOld",
    "default_registry",
    "file_name_from_generation",
    "find_index_dir",
    "generation_from_file_name",
    "last_commit_generation",
    "load_config_file",
    "read_commit",
    "read_latest_commit",
]

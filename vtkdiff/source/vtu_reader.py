# =============================================================================
# vtkdiff -- DATA ARRAY COMPARISON
# File:   vtkdiff/source/vtu_reader.py
# =============================================================================
#
# SCOPE
# -----
# Reads point and cell data arrays from VTK XML unstructured grid files
# (.vtu) and hands them out as DataArray values.
#
# SUPPORTED LAYOUT
# ----------------
#   <VTKFile type="UnstructuredGrid" byte_order=... header_type=... compressor=...>
#     <UnstructuredGrid>
#       <Piece NumberOfPoints=N NumberOfCells=M>
#         <PointData> <DataArray .../> ... </PointData>
#         <CellData>  <DataArray .../> ... </CellData>
#       </Piece> ...
#     </UnstructuredGrid>
#     <AppendedData encoding="raw|base64">_...</AppendedData>
#   </VTKFile>
#
# DataArray format: ascii | binary (inline base64) | appended (+ offset).
# Binary block layout:
#   uncompressed:  [nbytes] data
#   compressed:    [nblocks][block_size][last_block_size][csize_1..n] blocks
# Header words are UInt32 (default) or UInt64. Compressors: zlib, lzma, lz4.
# A last_block_size of 0 means the last block is a full block_size block.
#
# Pieces are concatenated in file order.
#
# FAILURES
# --------
# Unreadable or malformed files raise ReadError naming the file. Nothing in
# this module terminates the process.
# =============================================================================

from __future__ import annotations

import base64
import binascii
import lzma
import zlib
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

import lz4.block
import numpy as np

from vtkdiff.core.exceptions import ArrayNotFoundError, ConfigurationError, ReadError
from vtkdiff.core.validation import check_self_comparison
from vtkdiff.source.data_array import ASSOCIATIONS, CELL_DATA, POINT_DATA, DataArray

VTU_SUFFIX: str = ".vtu"

NUMERIC_TYPES: Dict[str, str] = {
    "Int8":    "i1",
    "UInt8":   "u1",
    "Int16":   "i2",
    "UInt16":  "u2",
    "Int32":   "i4",
    "UInt32":  "u4",
    "Int64":   "i8",
    "UInt64":  "u8",
    "Float32": "f4",
    "Float64": "f8",
}

_HEADER_TYPES: Dict[str, str] = {
    "UInt32": "u4",
    "UInt64": "u8",
}

_BYTE_ORDERS: Dict[str, str] = {
    "LittleEndian": "<",
    "BigEndian":    ">",
}

# Each decompressor takes (compressed block, uncompressed size).
_DECOMPRESSORS: Dict[str, Callable[[bytes, int], bytes]] = {
    "vtkZLibDataCompressor": lambda data, size: zlib.decompress(data),
    "vtkLZMADataCompressor": lambda data, size: lzma.decompress(data),
    "vtkLZ4DataCompressor":  lambda data, size: lz4.block.decompress(data, uncompressed_size=size),
}

_SECTIONS: Tuple[Tuple[str, str, str], ...] = (
    (POINT_DATA, "PointData", "NumberOfPoints"),
    (CELL_DATA,  "CellData",  "NumberOfCells"),
)

PathLike = Union[str, Path]


def _b64_len(num_bytes: int) -> int:
    """Number of base64 characters encoding num_bytes bytes."""
    return ((num_bytes + 2) // 3) * 4


def _b64decode_streams(text: bytes) -> bytes:
    """
    Decode base64 text holding one or more streams written back to back.

    Each stream ends at its padding; decoding a padded quad stops the
    standard decoder, so every stream is decoded on its own.
    """
    parts = []
    start = 0
    while start < len(text):
        pad = text.find(b"=", start)
        if pad < 0:
            parts.append(base64.b64decode(text[start:]))
            break
        end = (pad // 4 + 1) * 4
        parts.append(base64.b64decode(text[start:end]))
        start = end
    return b"".join(parts)


def _split_appended(content: bytes) -> Tuple[bytes, Optional[str], bytes]:
    """
    Cut the AppendedData payload out of the file before XML parsing.

    Raw appended data is not valid XML text. Returns
    (xml_bytes, encoding or None, payload).
    """
    start = content.find(b"<AppendedData")
    if start < 0:
        return content, None, b""
    tag_end = content.find(b">", start)
    end = content.rfind(b"</AppendedData>")
    if tag_end < 0 or end < tag_end:
        raise ValueError("unterminated AppendedData element")

    tag = content[start:tag_end + 1].decode("ascii", errors="replace")
    encoding = "base64" if "base64" in tag else "raw"

    marker = content.find(b"_", tag_end, end)
    if marker < 0:
        raise ValueError("AppendedData payload does not start with '_'")
    # Raw payload is kept byte for byte; blocks are located by their headers.
    payload = content[marker + 1:end]
    if encoding == "base64":
        payload = b"".join(payload.split())

    return content[:tag_end + 1] + content[end:], encoding, payload


def _own_text(element: ET.Element) -> str:
    """
    Character data of element itself, without the text of child elements.

    VTK writes <InformationKey> children inside a DataArray before its
    values, so the values are the tails of those children.
    """
    return (element.text or "") + "".join(child.tail or "" for child in element)


class _BlockDecoder:
    """Decodes binary data blocks for one file's byte order and header type."""

    def __init__(self, byte_order: str, header_type: str, compressor: Optional[str]):
        self.endian = _BYTE_ORDERS[byte_order]
        self.header_dtype = np.dtype(self.endian + _HEADER_TYPES[header_type])
        self.header_size = self.header_dtype.itemsize
        self.decompress = _DECOMPRESSORS[compressor] if compressor else None

    def _words(self, buf: bytes, count: int, offset: int) -> List[int]:
        if count == 0:
            return []
        end = offset + count * self.header_size
        if end > len(buf):
            raise ValueError("binary block header is truncated")
        return [int(w) for w in np.frombuffer(buf, dtype=self.header_dtype, count=count, offset=offset)]

    def block_bytes(self, buf: bytes, offset: int = 0) -> bytes:
        """Return the decoded payload of the block starting at offset."""
        h = self.header_size
        if self.decompress is None:
            (nbytes,) = self._words(buf, 1, offset)
            start = offset + h
            if start + nbytes > len(buf):
                raise ValueError(
                    f"binary block is truncated: expected {nbytes} bytes, "
                    f"found {len(buf) - start}"
                )
            return buf[start:start + nbytes]

        nblocks, block_size, last_block_size = self._words(buf, 3, offset)
        csizes = self._words(buf, nblocks, offset + 3 * h)
        sizes = [block_size] * nblocks
        if nblocks and last_block_size:
            sizes[-1] = last_block_size

        pos = offset + (3 + nblocks) * h
        chunks = []
        for csize, size in zip(csizes, sizes):
            if pos + csize > len(buf):
                raise ValueError("compressed block is truncated")
            chunk = self.decompress(buf[pos:pos + csize], size)
            if len(chunk) != size:
                raise ValueError(
                    f"compressed block holds {len(chunk)} bytes, expected {size}"
                )
            chunks.append(chunk)
            pos += csize
        return b"".join(chunks)

    def base64_extent(self, text: bytes, offset: int) -> int:
        """
        Length in characters of the base64 encoded block at offset.

        Uncompressed blocks may encode header and data as one stream or as
        two; compressed blocks always encode the header as its own stream.
        """
        h = self.header_size
        if self.decompress is None:
            head_chars = _b64_len(h)
            head = base64.b64decode(text[offset:offset + head_chars])
            (nbytes,) = self._words(head, 1, 0)
            if text[offset + head_chars - 1:offset + head_chars] == b"=":
                return head_chars + _b64_len(nbytes)
            return _b64_len(h + nbytes)

        lead = base64.b64decode(text[offset:offset + _b64_len(3 * h)])
        nblocks, _, _ = self._words(lead, 3, 0)
        header_chars = _b64_len((3 + nblocks) * h)
        header = base64.b64decode(text[offset:offset + header_chars])
        csizes = self._words(header, nblocks, 3 * h)
        return header_chars + _b64_len(sum(csizes))


class VtuDataset:
    """
    Arrays of one .vtu file, keyed by association and name.

    Methods:
      has_array(name, association) -> bool
      get_array(name, association) -> DataArray or None
      array_names(association)     -> list of names in file order
    """

    def __init__(self, location: str, arrays: Dict[str, Dict[str, DataArray]]):
        self.location = location
        self._arrays = arrays

    def has_array(self, name: str, association: str) -> bool:
        return name in self._arrays[association]

    def get_array(self, name: str, association: str) -> Optional[DataArray]:
        return self._arrays[association].get(name)

    def array_names(self, association: str) -> List[str]:
        return list(self._arrays[association])

    @property
    def point_data(self) -> Dict[str, DataArray]:
        return dict(self._arrays[POINT_DATA])

    @property
    def cell_data(self) -> Dict[str, DataArray]:
        return dict(self._arrays[CELL_DATA])


class VtuReader:
    """
    Reads a .vtu file into a VtuDataset.

    Method:
      read(location) -> VtuDataset

    Raises ReadError on any I/O, XML or payload decoding failure.
    """

    def read(self, location: PathLike) -> VtuDataset:
        location = str(location)
        try:
            with open(location, "rb") as f:
                content = f.read()
        except OSError as exc:
            raise ReadError(location, f"cannot open file: {exc.strerror or exc}") from exc

        try:
            xml_bytes, encoding, appended = _split_appended(content)
            root = ET.fromstring(xml_bytes)
        except (ValueError, ET.ParseError) as exc:
            raise ReadError(location, f"malformed XML: {exc}") from exc

        try:
            arrays = self._read_arrays(root, location, encoding, appended)
        except (
            ValueError,
            KeyError,
            binascii.Error,
            zlib.error,
            lzma.LZMAError,
            lz4.block.LZ4BlockError,
        ) as exc:
            raise ReadError(location, str(exc) or exc.__class__.__name__) from exc

        return VtuDataset(location, arrays)

    def _read_arrays(
        self,
        root: ET.Element,
        location: str,
        encoding: Optional[str],
        appended: bytes,
    ) -> Dict[str, Dict[str, DataArray]]:
        if root.tag != "VTKFile":
            raise ValueError(f"root element is <{root.tag}>, expected <VTKFile>")
        if root.get("type") != "UnstructuredGrid":
            raise ValueError(
                f"VTKFile type is '{root.get('type')}', expected 'UnstructuredGrid'"
            )

        byte_order = root.get("byte_order", "LittleEndian")
        header_type = root.get("header_type", "UInt32")
        compressor = root.get("compressor") or None
        if byte_order not in _BYTE_ORDERS:
            raise ValueError(f"unsupported byte_order '{byte_order}'")
        if header_type not in _HEADER_TYPES:
            raise ValueError(f"unsupported header_type '{header_type}'")
        if compressor is not None and compressor not in _DECOMPRESSORS:
            raise ValueError(f"unsupported compressor '{compressor}'")
        decoder = _BlockDecoder(byte_order, header_type, compressor)

        grid = root.find("UnstructuredGrid")
        if grid is None:
            raise ValueError("missing <UnstructuredGrid> element")
        pieces = grid.findall("Piece")
        if not pieces:
            raise ValueError("<UnstructuredGrid> contains no <Piece>")

        # name -> per-piece blocks, per association
        collected: Dict[str, Dict[str, list]] = {assoc: {} for assoc in ASSOCIATIONS}
        for piece_idx, piece in enumerate(pieces):
            for assoc, tag, count_attr in _SECTIONS:
                num_tuples = int(piece.get(count_attr, "0"))
                section = piece.find(tag)
                if section is None:
                    continue
                for element in section.findall("DataArray"):
                    name = element.get("Name")
                    if not name:
                        raise ValueError(f"unnamed DataArray in <{tag}> of piece {piece_idx}")
                    block = self._read_data_array(element, num_tuples, decoder, encoding, appended)
                    collected[assoc].setdefault(name, []).append(block)

        arrays: Dict[str, Dict[str, DataArray]] = {}
        for assoc in ASSOCIATIONS:
            arrays[assoc] = {}
            for name, blocks in collected[assoc].items():
                if len(blocks) != len(pieces):
                    raise ValueError(
                        f"data array '{name}' is not present in every piece"
                    )
                arrays[assoc][name] = self._join_blocks(name, assoc, blocks, location)
        return arrays

    def _read_data_array(
        self,
        element: ET.Element,
        num_tuples: int,
        decoder: _BlockDecoder,
        encoding: Optional[str],
        appended: bytes,
    ) -> Tuple[str, int, int, Optional[np.ndarray]]:
        name = element.get("Name")
        data_type = element.get("type", "")
        num_components = int(element.get("NumberOfComponents", "1"))
        if num_components < 1:
            raise ValueError(f"data array '{name}' has NumberOfComponents={num_components}")

        if data_type not in NUMERIC_TYPES:
            return data_type, num_tuples, num_components, None

        value_dtype = np.dtype(decoder.endian + NUMERIC_TYPES[data_type])
        fmt = element.get("format", "ascii")

        if fmt == "ascii":
            text = _own_text(element)
            values = np.array(text.split(), dtype=np.float64)
        elif fmt == "binary":
            text = b"".join(_own_text(element).encode("ascii").split())
            raw = decoder.block_bytes(_b64decode_streams(text))
            values = np.frombuffer(raw, dtype=value_dtype)
        elif fmt == "appended":
            if encoding is None:
                raise ValueError(f"data array '{name}' is appended but file has no <AppendedData>")
            offset = int(element.get("offset", "0"))
            if encoding == "raw":
                raw = decoder.block_bytes(appended, offset)
            else:
                extent = decoder.base64_extent(appended, offset)
                raw = decoder.block_bytes(_b64decode_streams(appended[offset:offset + extent]))
            values = np.frombuffer(raw, dtype=value_dtype)
        else:
            raise ValueError(f"data array '{name}' has unsupported format '{fmt}'")

        expected = num_tuples * num_components
        if values.size != expected:
            raise ValueError(
                f"data array '{name}' holds {values.size} values, expected "
                f"{expected} ({num_tuples} tuples x {num_components} components)"
            )
        values = values.astype(np.float64).reshape(num_tuples, num_components)
        return data_type, num_tuples, num_components, values

    @staticmethod
    def _join_blocks(
        name: str,
        association: str,
        blocks: List[Tuple[str, int, int, Optional[np.ndarray]]],
        location: str,
    ) -> DataArray:
        data_type, _, num_components, _ = blocks[0]
        for other_type, _, other_components, _ in blocks[1:]:
            if other_type != data_type or other_components != num_components:
                raise ValueError(
                    f"data array '{name}' changes type or component count between pieces"
                )
        num_tuples = sum(b[1] for b in blocks)

        if data_type not in NUMERIC_TYPES:
            values = None
        else:
            values = np.concatenate([b[3] for b in blocks], axis=0)
            values.setflags(write=False)

        return DataArray(
            name=name,
            association=association,
            data_type=data_type,
            is_numeric=values is not None,
            num_tuples=num_tuples,
            num_components=num_components,
            values=values,
            location=location,
        )


# =============================================================================
# ARRAY SOURCE ENTRY POINTS
# =============================================================================

def check_input_type(location: PathLike) -> None:
    """Only .vtu files are supported. Raises ConfigurationError otherwise."""
    if not str(location).endswith(VTU_SUFFIX):
        raise ConfigurationError(
            f"Invalid file type `{location}'! Only {VTU_SUFFIX} files are supported.",
            field_name="input",
            value=str(location),
        )


def _find_array(
    dataset: VtuDataset,
    array_name: str,
    association: Optional[str],
) -> DataArray:
    if association is None:
        for assoc in ASSOCIATIONS:
            if dataset.has_array(array_name, assoc):
                return dataset.get_array(array_name, assoc)
        raise ArrayNotFoundError(array_name, dataset.location)

    if association not in ASSOCIATIONS:
        raise ConfigurationError(
            f"association must be one of {ASSOCIATIONS}. Received: {association!r}",
            field_name="association",
            value=association,
        )
    array = dataset.get_array(array_name, association)
    if array is None:
        raise ArrayNotFoundError(
            array_name, dataset.location, where=f"not found in {association} data",
        )
    return array


def load_array(
    location:    PathLike,
    array_name:  str,
    association: Optional[str] = None,
    reader:      Optional[VtuReader] = None,
) -> DataArray:
    """
    Load one named array from a .vtu file.

    With association=None the array is looked up in point data first,
    then in cell data.

    Raises
    ------
    ConfigurationError   if the file is not a .vtu file.
    ReadError            if the file cannot be read or is malformed.
    ArrayNotFoundError   if the array is not present.
    """
    check_input_type(location)
    dataset = (reader or VtuReader()).read(location)
    return _find_array(dataset, array_name, association)


def read_data_arrays(
    input_a: PathLike,
    input_b: Optional[PathLike],
    array_a: str,
    array_b: str,
    reader:  Optional[VtuReader] = None,
) -> Tuple[DataArray, DataArray]:
    """
    Read the two arrays to be compared.

    Array a is looked up in point data, then in cell data of input_a.
    Array b is looked up in the same association, in input_b if given,
    otherwise in input_a. Comparing an array to itself within one file
    is a ConfigurationError.
    """
    reader = reader or VtuReader()
    check_input_type(input_a)
    if input_b:
        check_input_type(input_b)

    dataset_a = reader.read(input_a)
    a = _find_array(dataset_a, array_a, None)

    if not input_b:
        check_self_comparison(str(input_a), None, array_a, array_b)
        dataset_b = dataset_a
    else:
        dataset_b = reader.read(input_b)

    b = _find_array(dataset_b, array_b, a.association)
    return a, b

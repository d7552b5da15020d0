import base64
import lzma
import zlib
from pathlib import Path
from typing import Dict, List, Optional

import lz4.block
import numpy as np
import pytest

from vtkdiff.source import DataArray


# ---------------------------------------------------------------------------
# VTU FILE WRITER
# ---------------------------------------------------------------------------
# Writes minimal VTK XML unstructured grid files holding only point and cell
# data. Array values are numpy arrays (1-D = one component) or
# ("String", [...]) for non-numeric arrays.

_TYPE_NAMES = {
    "int8":    "Int8",
    "uint8":   "UInt8",
    "int16":   "Int16",
    "uint16":  "UInt16",
    "int32":   "Int32",
    "uint32":  "UInt32",
    "int64":   "Int64",
    "uint64":  "UInt64",
    "float32": "Float32",
    "float64": "Float64",
}

FORMATS = ("ascii", "binary", "appended_raw", "appended_base64")


def _as_2d(values: np.ndarray) -> np.ndarray:
    values = np.asarray(values)
    if values.ndim == 1:
        return values.reshape(-1, 1)
    return values


def _num_tuples(arrays: Dict) -> int:
    for value in arrays.values():
        if isinstance(value, tuple):
            return len(value[1])
        return _as_2d(value).shape[0]
    return 0


COMPRESSORS = {
    "vtkZLibDataCompressor": zlib.compress,
    "vtkLZMADataCompressor": lzma.compress,
    "vtkLZ4DataCompressor":  lambda data: lz4.block.compress(data, store_size=False),
}


class VtuWriter:
    """
    Writes arrays the way vtkXMLUnstructuredGridWriter lays them out:
    multi-component arrays carry <InformationKey> children ahead of their
    values, and compressed payloads are cut into block_size blocks.
    """

    def __init__(
        self,
        fmt:              str = "ascii",
        compressor:       Optional[str] = None,
        header_type:      str = "UInt32",
        byte_order:       str = "LittleEndian",
        joint_stream:     bool = False,
        block_size:       int = 32768,
        information_keys: bool = True,
    ):
        assert fmt in FORMATS
        assert compressor is None or compressor in COMPRESSORS
        self.fmt = fmt
        self.compressor = compressor
        self.header_type = header_type
        self.byte_order = byte_order
        self.joint_stream = joint_stream
        self.block_size = block_size
        self.information_keys = information_keys
        self.endian = "<" if byte_order == "LittleEndian" else ">"
        self._raw = b""
        self._b64 = b""

    def _block(self, values: np.ndarray):
        hdt = np.dtype(self.endian + ("u4" if self.header_type == "UInt32" else "u8"))
        data = np.ascontiguousarray(values.astype(values.dtype.newbyteorder(self.endian))).tobytes()
        if self.compressor is None:
            return np.array([len(data)], dtype=hdt).tobytes(), data

        compress = COMPRESSORS[self.compressor]
        chunks = [data[i:i + self.block_size] for i in range(0, len(data), self.block_size)]
        packed = [compress(chunk) for chunk in chunks]
        # 0 marks a full last block, as VTK writes it.
        last_block_size = len(data) % self.block_size
        header = [len(chunks), self.block_size, last_block_size] + [len(p) for p in packed]
        return np.array(header, dtype=hdt).tobytes(), b"".join(packed)

    @staticmethod
    def _information_keys(values: np.ndarray) -> str:
        # VTK stores the range of tuple magnitudes for vector arrays.
        norms = np.sqrt((values.astype(np.float64) ** 2).sum(axis=1)) if len(values) else np.zeros(1)
        keys = []
        for key in ("L2_NORM_RANGE", "L2_NORM_FINITE_RANGE"):
            keys.append(
                f'\n          <InformationKey name="{key}" location="vtkDataArray" length="2">\n'
                f'            <Value index="0">\n              {float(norms.min())!r}\n            </Value>\n'
                f'            <Value index="1">\n              {float(norms.max())!r}\n            </Value>\n'
                "          </InformationKey>"
            )
        return "".join(keys)

    def _encode(self, header: bytes, payload: bytes) -> bytes:
        if self.joint_stream and self.compressor is None:
            return base64.b64encode(header + payload)
        return base64.b64encode(header) + base64.b64encode(payload)

    def _data_array(self, name: str, value) -> str:
        if isinstance(value, tuple):
            type_name, strings = value
            text = " ".join(str(len(s)) for s in strings)
            return (
                f'<DataArray type="{type_name}" Name="{name}" format="ascii">'
                f"{text}</DataArray>"
            )

        values = _as_2d(value)
        type_name = _TYPE_NAMES[str(values.dtype)]
        attrs = (
            f'type="{type_name}" Name="{name}" '
            f'NumberOfComponents="{values.shape[1]}"'
        )
        keys = ""
        if self.information_keys and values.shape[1] > 1:
            keys = self._information_keys(values)

        if self.fmt == "ascii":
            flat = values.reshape(-1)
            if values.dtype.kind == "f":
                text = " ".join(repr(float(v)) for v in flat)
            else:
                text = " ".join(str(int(v)) for v in flat)
            return f'<DataArray {attrs} format="ascii">{keys}\n{text}\n</DataArray>'

        header, payload = self._block(values)
        if self.fmt == "binary":
            text = self._encode(header, payload).decode("ascii")
            return f'<DataArray {attrs} format="binary">{keys}\n{text}\n</DataArray>'
        if self.fmt == "appended_raw":
            offset = len(self._raw)
            self._raw += header + payload
        else:
            offset = len(self._b64)
            self._b64 += self._encode(header, payload)
        if keys:
            return f'<DataArray {attrs} format="appended" offset="{offset}">{keys}\n</DataArray>'
        return f'<DataArray {attrs} format="appended" offset="{offset}"/>'

    def write(self, path: Path, pieces: List[Dict]) -> Path:
        compressor = f' compressor="{self.compressor}"' if self.compressor else ""
        parts = [
            '<?xml version="1.0"?>\n'
            f'<VTKFile type="UnstructuredGrid" version="1.0" byte_order="{self.byte_order}" '
            f'header_type="{self.header_type}"{compressor}>\n'
            "  <UnstructuredGrid>\n"
        ]
        for piece in pieces:
            point_data = piece.get("point", {})
            cell_data = piece.get("cell", {})
            parts.append(
                f'    <Piece NumberOfPoints="{_num_tuples(point_data)}" '
                f'NumberOfCells="{_num_tuples(cell_data)}">\n'
            )
            for tag, arrays in (("PointData", point_data), ("CellData", cell_data)):
                parts.append(f"      <{tag}>\n")
                for name, value in arrays.items():
                    parts.append("        " + self._data_array(name, value) + "\n")
                parts.append(f"      </{tag}>\n")
            parts.append("    </Piece>\n")
        parts.append("  </UnstructuredGrid>\n")

        content = "".join(parts).encode("ascii")
        if self.fmt == "appended_raw":
            content += b'  <AppendedData encoding="raw">\n   _' + self._raw + b"\n  </AppendedData>\n"
        elif self.fmt == "appended_base64":
            content += b'  <AppendedData encoding="base64">\n   _' + self._b64 + b"\n  </AppendedData>\n"
        content += b"</VTKFile>\n"

        path = Path(path)
        path.write_bytes(content)
        return path


@pytest.fixture
def write_vtu(tmp_path):
    """
    Factory fixture: write_vtu(name, point=..., cell=..., pieces=..., **writer_options)
    writes tmp_path/name and returns its path as str.
    """
    def _write(
        name: str,
        point: Optional[Dict] = None,
        cell: Optional[Dict] = None,
        pieces: Optional[List[Dict]] = None,
        **options,
    ) -> str:
        if pieces is None:
            pieces = [{"point": point or {}, "cell": cell or {}}]
        return str(VtuWriter(**options).write(tmp_path / name, pieces))

    return _write


# ---------------------------------------------------------------------------
# IN-MEMORY ARRAYS
# ---------------------------------------------------------------------------

@pytest.fixture
def scalar_pair():
    """One-component arrays differing only at tuple 1 (2.0 vs 2.1)."""
    return (
        DataArray.from_values("a", [1.0, 2.0, 3.0]),
        DataArray.from_values("b", [1.0, 2.1, 3.0]),
    )


@pytest.fixture
def vector_values() -> np.ndarray:
    """Four 3-component tuples with mixed signs and a zero component."""
    return np.array([
        [1.0, -2.0, 0.0],
        [0.5, 4.0, 1.0e-3],
        [-7.25, 8.0, 1.0e6],
        [3.0, 0.0, -1.0],
    ])

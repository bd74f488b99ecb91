"""
Reading and writing graphs in the DIMACS binary clique format (``.clq.b``)
and the companion solution files (``.sol``).

Binary layout::

    <decimal preamble length L>\\n
    <L bytes of preamble text containing a line "p edge <n> <m>">
    <row 0: 1 byte><row 1: 1 byte>...<row i: ceil((i+1)/8) bytes>...

Row ``i`` covers columns ``0..i`` only. The bit for column ``j`` is bit
``7 - (j % 8)`` of byte ``j // 8`` of that row (most significant bit first);
the lower triangle is mirrored to obtain the full symmetric matrix.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Iterable, List, Tuple, Union

import numpy as np

from .exceptions import FormatError, TruncatedGraphError
from .graph import BitGraph, GraphBuilder

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

GRAPH_DECLARATION = "p"
GRAPH_FORMAT = "edge"

# Chunk size for streams whose remaining length cannot be known up front
READ_CHUNK_SIZE = 1 << 20


def row_byte_length(row: int) -> int:
    """Number of bytes encoding row ``row`` (columns ``0..row``)."""
    return (row + 8) // 8


def payload_byte_length(num_vertices: int) -> int:
    """Total bytes of the adjacency rows of a graph with ``num_vertices`` vertices."""
    full, rest = divmod(num_vertices, 8)
    return num_vertices + 8 * full * (full - 1) // 2 + rest * full


def read_at_most(stream: BinaryIO, size: int) -> bytes:
    """
    Read up to ``size`` bytes.

    Memory use is bounded by the bytes actually left in the stream, not by
    ``size``, which usually comes from a file header.
    """
    if stream.seekable():
        position = stream.tell()
        available = max(stream.seek(0, os.SEEK_END) - position, 0)
        stream.seek(position)
        return stream.read(min(size, available))

    data = bytearray()
    while len(data) < size:
        chunk = stream.read(min(size - len(data), READ_CHUNK_SIZE))
        if not chunk:
            break
        data.extend(chunk)
    return bytes(data)


def parse_preamble(preamble: str) -> Tuple[int, int]:
    """
    Find the graph declaration line in a preamble.

    Args:
        preamble: Decoded preamble text.

    Returns:
        Tuple ``(num_vertices, declared_edges)``. ``declared_edges`` is -1 when
        the declaration does not carry an edge count.

    Raises:
        FormatError: If there is no declaration line or its counts are invalid.
    """
    for line in preamble.splitlines():
        parts = line.split()
        if not parts or parts[0] != GRAPH_DECLARATION:
            continue
        if len(parts) < 2 or parts[1] != GRAPH_FORMAT:
            raise FormatError(f"Unsupported graph declaration, expected 'p edge': {line.strip()!r}")
        if len(parts) < 3:
            raise FormatError(f"Graph declaration is missing the vertex count: {line.strip()!r}")
        try:
            num_vertices = int(parts[2])
            declared_edges = int(parts[3]) if len(parts) > 3 else -1
        except ValueError:
            raise FormatError(f"Non-numeric counts in graph declaration: {line.strip()!r}") from None
        if num_vertices <= 0:
            raise FormatError(f"Invalid vertex count {num_vertices} in graph declaration")
        return num_vertices, declared_edges

    raise FormatError("No graph declaration line ('p edge <n> <m>') found in preamble")


class DimacsBinaryReader:
    """Decoder for DIMACS binary clique files."""

    def read(self, path: PathLike) -> BitGraph:
        """
        Read a graph from a ``.clq.b`` file.

        Raises:
            FormatError: Malformed length prefix, short preamble, missing or
                non-'p edge' declaration, or zero vertices.
            TruncatedGraphError: The adjacency payload ends before the last row.
            OSError: The file cannot be opened or read.
        """
        with open(path, "rb") as stream:
            graph = self.read_stream(stream)
        logger.info("Loaded %s: %d vertices, %d edges", path, graph.num_vertices, graph.num_edges)
        return graph

    def read_stream(self, stream: BinaryIO) -> BitGraph:
        preamble = self._read_preamble(stream)
        num_vertices, declared_edges = parse_preamble(preamble)

        # Check the payload before allocating the n x n matrix
        payload = self._read_payload(stream, num_vertices)
        builder = GraphBuilder(num_vertices)
        self._decode_rows(payload, builder)

        if declared_edges >= 0 and declared_edges != builder.num_edges:
            logger.warning(
                "Preamble declares %d edges but %d were decoded", declared_edges, builder.num_edges
            )
        if stream.read(1):
            logger.debug("Ignoring trailing bytes after adjacency payload")

        return builder.build()

    def _read_preamble(self, stream: BinaryIO) -> str:
        header = stream.readline()
        if not header.endswith(b"\n"):
            raise FormatError("Missing preamble length line")
        try:
            length = int(header.decode("ascii").strip())
        except (UnicodeDecodeError, ValueError):
            raise FormatError(f"Preamble length is not a decimal integer: {header!r}") from None
        if length < 0:
            raise FormatError(f"Negative preamble length {length}")

        preamble = read_at_most(stream, length)
        if len(preamble) != length:
            raise FormatError(f"Preamble declares {length} bytes but only {len(preamble)} are available")
        return preamble.decode("ascii", errors="replace")

    def _read_payload(self, stream: BinaryIO, num_vertices: int) -> bytes:
        required = payload_byte_length(num_vertices)
        payload = read_at_most(stream, required)
        if len(payload) != required:
            raise TruncatedGraphError(
                f"Adjacency data for {num_vertices} vertices needs {required} bytes, "
                f"only {len(payload)} available"
            )
        return payload

    def _decode_rows(self, payload: bytes, builder: GraphBuilder) -> None:
        data = np.frombuffer(payload, dtype=np.uint8)
        offset = 0
        for row in range(builder.num_vertices):
            num_bytes = row_byte_length(row)
            # unpackbits is MSB first: bit index k of the row is column k
            bits = np.unpackbits(data[offset:offset + num_bytes])[:row]
            offset += num_bytes
            builder.add_row(row, np.flatnonzero(bits))


class DimacsBinaryWriter:
    """Encoder producing files that DimacsBinaryReader reads back unchanged."""

    def write(self, graph: BitGraph, path: PathLike, comments: Iterable[str] = ()) -> None:
        with open(path, "wb") as stream:
            self.write_stream(graph, stream, comments)

    def write_stream(self, graph: BitGraph, stream: BinaryIO, comments: Iterable[str] = ()) -> None:
        lines = [f"c {comment}\n" for comment in comments]
        lines.append(f"p edge {graph.num_vertices} {graph.num_edges}\n")
        preamble = "".join(lines).encode("ascii")

        stream.write(f"{len(preamble)}\n".encode("ascii"))
        stream.write(preamble)
        adjacency = graph.adjacency
        for row in range(graph.num_vertices):
            stream.write(np.packbits(adjacency[row, : row + 1]).tobytes())


def read_dimacs_binary_graph(path: PathLike) -> BitGraph:
    """Read a graph from a DIMACS binary clique file."""
    return DimacsBinaryReader().read(path)


def write_dimacs_binary_graph(graph: BitGraph, path: PathLike, comments: Iterable[str] = ()) -> None:
    """Write a graph as a DIMACS binary clique file."""
    DimacsBinaryWriter().write(graph, path, comments)


@dataclass
class KnownSolution:
    """Reference clique read from a ``.sol`` file."""
    size: int
    vertices: List[int] = field(default_factory=list)


def read_solution_file(path: PathLike) -> KnownSolution:
    """
    Read a reference solution.

    Format:
    - ``s cqu <size>`` gives the optimal clique size
    - ``v <i> [<j> ...]`` lines list clique vertices

    Vertex indices are returned sorted, exactly as written in the file.

    Raises:
        FormatError: If no ``s cqu`` line is present or a field is not an integer.
        OSError: If the file cannot be read.
    """
    size = None
    vertices: List[int] = []

    with open(path, "r", encoding="ascii", errors="replace") as f:
        for line in f:
            parts = line.split()
            if not parts:
                continue
            try:
                if parts[0] == "s" and len(parts) >= 3 and parts[1] == "cqu":
                    if size is None:
                        size = int(parts[2])
                elif parts[0] == "v":
                    vertices.extend(int(token) for token in parts[1:])
            except ValueError:
                raise FormatError(f"Malformed line in solution file {path}: {line.strip()!r}") from None

    if size is None:
        raise FormatError(f"No 's cqu <size>' line found in solution file {path}")

    return KnownSolution(size=size, vertices=sorted(vertices))

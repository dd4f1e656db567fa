"""
Hash index from grapheme clusters to blit pattern offsets.

Each font gets a FontIndex: one BlockIndex per Unicode block, each a list of
(murmur3 hash, cluster, data offset) entries kept sorted by hash so the
renderer can binary search a table of hashes for the first codepoint's block.
"""

import bisect
from typing import Iterable, Iterator, NamedTuple

from blit_pattern import BlitPattern
from charmap import GCAlias, cluster_from_hex, hex_from_cluster
from murmur3 import murmur3
from ublock import UBlock, block_of_cluster


class ClusterNotIndexed(LookupError):
    """A grapheme cluster has no entry in its block's index."""

    def __init__(self, cluster: str, block: UBlock):
        self.cluster = cluster
        self.block = block
        super().__init__(
            f"Grapheme cluster {cluster!r} ({hex_from_cluster(cluster)}) "
            f"is not in the index for block {block}"
        )


class HashCollision(ValueError):
    """Two clusters in the same block hash to the same value."""


class IndexEntry(NamedTuple):
    m3_hash: int
    cluster: str
    data_offset: int


class BlockIndex:
    """Index entries for grapheme clusters whose first codepoint is in one block."""

    def __init__(self, block: UBlock, entries: Iterable[IndexEntry] = ()):
        self.block = block
        self.entries = sorted(entries)
        self._check_unique()

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[IndexEntry]:
        return iter(self.entries)

    def __getitem__(self, i: int) -> IndexEntry:
        return self.entries[i]

    def _check_unique(self):
        for a, b in zip(self.entries, self.entries[1:]):
            if a.m3_hash == b.m3_hash:
                self._collision(a, b)

    def _collision(self, a: IndexEntry, b: IndexEntry):
        if a.cluster == b.cluster:
            raise HashCollision(
                f"Grapheme cluster {a.cluster!r} ({hex_from_cluster(a.cluster)}) "
                f"is indexed twice in block {self.block}"
            )
        raise HashCollision(
            f"Clusters {a.cluster!r} and {b.cluster!r} both hash to 0x{a.m3_hash:08X} "
            f"in block {self.block}; change the murmur3 seed"
        )

    def insert(self, entry: IndexEntry):
        """Insert entry, keeping the entries sorted by hash."""
        existing = self.find(entry.m3_hash)
        if existing is not None:
            if existing == entry:
                return
            self._collision(existing, entry)
        bisect.insort(self.entries, entry)

    def extend(self, entries: Iterable[IndexEntry]):
        """Add a batch of entries and sort once."""
        self.entries.extend(entries)
        self.entries.sort()
        self._check_unique()

    def find(self, m3_hash: int) -> IndexEntry | None:
        """Binary search for the entry with m3_hash."""
        n = bisect.bisect_left(self.entries, m3_hash, key=lambda e: e.m3_hash)
        if n == len(self.entries) or self.entries[n].m3_hash != m3_hash:
            return None
        return self.entries[n]

    def hashes(self) -> list[int]:
        return [entry.m3_hash for entry in self.entries]

    def cluster_length_list(self) -> list[int]:
        """
        Distinct cluster lengths (in codepoints) present in this block, longest first.

        Greedy matching at render time only needs to try these lengths. For
        example, when a block only has clusters of 1 or 5 codepoints, there is no
        point looking ahead more than 5 codepoints or trying lengths 2-4.
        """
        return sorted({len(entry.cluster) for entry in self.entries}, reverse=True)


class FontIndex:
    """All block indexes for one font, keyed by Unicode block."""

    def __init__(self, seed: int = 0, length: str = "codepoints"):
        self.seed = seed
        self.length = length
        self.blocks: dict[UBlock, BlockIndex] = {}

    def __len__(self) -> int:
        return sum(len(b) for b in self.blocks.values())

    def __iter__(self) -> Iterator[UBlock]:
        return iter(self.index_keys())

    def __getitem__(self, block: UBlock) -> BlockIndex:
        return self.blocks[block]

    def hash(self, cluster: str) -> int:
        return murmur3(cluster, self.seed, self.length)

    def entry_for(self, cluster: str, data_offset: int) -> tuple[UBlock, IndexEntry]:
        block = block_of_cluster(cluster)
        return block, IndexEntry(self.hash(cluster), cluster, data_offset)

    def _block_index(self, block: UBlock) -> BlockIndex:
        if block not in self.blocks:
            self.blocks[block] = BlockIndex(block)
        return self.blocks[block]

    def insert(self, cluster: str, data_offset: int):
        """Add one cluster to its block's index."""
        block, entry = self.entry_for(cluster, data_offset)
        self._block_index(block).insert(entry)

    def extend(self, pairs: Iterable[tuple[str, int]]):
        """Add (cluster, data offset) pairs in bulk, sorting each block once."""
        batches: dict[UBlock, list[IndexEntry]] = {}
        for cluster, data_offset in pairs:
            block, entry = self.entry_for(cluster, data_offset)
            batches.setdefault(block, []).append(entry)
        for block, entries in batches.items():
            self._block_index(block).extend(entries)

    def find_data_offset(self, block: UBlock, cluster: str) -> int:
        """Return the pattern data offset for cluster, or raise ClusterNotIndexed."""
        block_index = self.blocks.get(block)
        entry = block_index.find(self.hash(cluster)) if block_index else None
        if entry is None or entry.cluster != cluster:
            raise ClusterNotIndexed(cluster, block)
        return entry.data_offset

    def lookup(self, cluster: str) -> int:
        return self.find_data_offset(block_of_cluster(cluster), cluster)

    def add_aliases(self, aliases: Iterable[GCAlias]):
        """
        Index alias clusters at the data offset of their canonical clusters.

        The canonical and alias forms may start in different Unicode blocks
        (e.g. normalization form C vs. D), so each goes to its own block.
        """
        for alias in aliases:
            canon_cluster = cluster_from_hex(alias.canon_hex)
            data_offset = self.find_data_offset(block_of_cluster(canon_cluster), canon_cluster)
            self.insert(cluster_from_hex(alias.alias_hex), data_offset)

    def index_keys(self) -> list[UBlock]:
        """Blocks present in this index, in codepoint order."""
        return sorted(self.blocks, key=lambda b: b.low)

    def max_cluster_length(self) -> int:
        return max((len(e.cluster) for b in self.blocks.values() for e in b), default=0)


class GlyphSet:
    """A font's concatenated pattern data plus the index into it."""

    def __init__(self, seed: int = 0, length: str = "codepoints"):
        self.data: list[int] = []
        self.patterns: list[tuple[int, BlitPattern]] = []
        self.index = FontIndex(seed, length)

    @property
    def data_len(self) -> int:
        return len(self.data)

    @classmethod
    def from_patterns(cls, patterns: Iterable[BlitPattern], seed: int = 0, length: str = "codepoints"):
        """Concatenate patterns and index each cluster at its header word's offset."""
        glyph_set = cls(seed, length)
        pairs = []
        for pattern in patterns:
            pairs.append((pattern.char_spec.cluster, glyph_set.data_len))
            glyph_set.patterns.append((glyph_set.data_len, pattern))
            glyph_set.data.extend(pattern.words)
        glyph_set.index.extend(pairs)
        return glyph_set

    def add_aliases(self, aliases: Iterable[GCAlias]):
        self.index.add_aliases(aliases)

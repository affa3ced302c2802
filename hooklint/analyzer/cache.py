"""Result cache for repeat lint runs.

Cache Strategy:
- Store the diagnostics produced for each file
- Key each entry on file mtime + size + configuration fingerprint
- If a file and the configuration are unchanged, skip parsing entirely

Cache Format: SQLite database
Location: .hooklint_cache/ in project root (configurable)
"""

import sqlite3
import json
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .rules import Diagnostic


class ResultCache:
    """Cache of per-file diagnostics."""

    def __init__(self, project_root: Path, fingerprint: str = "", cache_dir: str = ".hooklint_cache"):
        """Initialize cache database.

        Args:
            project_root: Root directory of the project being linted
            fingerprint: Configuration fingerprint; entries written under a
                different fingerprint are treated as stale
            cache_dir: Directory name under project_root
        """
        self.project_root = Path(project_root)
        self.fingerprint = fingerprint
        self.cache_dir = self.project_root / cache_dir
        self.cache_file = self.cache_dir / 'results.db'

        self.cache_dir.mkdir(parents=True, exist_ok=True)

        self.conn = sqlite3.connect(str(self.cache_file))
        self._init_database()

    def _init_database(self):
        """Create cache tables if they don't exist."""
        cursor = self.conn.cursor()

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS file_metadata (
                file_path TEXT PRIMARY KEY,
                mtime REAL NOT NULL,
                size INTEGER NOT NULL,
                cache_key TEXT NOT NULL
            )
        ''')

        # Diagnostics serialized as a JSON list of Diagnostic.to_dict()
        cursor.execute('''
            CREATE TABLE IF NOT EXISTS file_results (
                file_path TEXT PRIMARY KEY,
                diagnostics TEXT NOT NULL,
                cache_key TEXT NOT NULL,
                FOREIGN KEY (file_path) REFERENCES file_metadata(file_path)
            )
        ''')

        cursor.execute('''
            CREATE INDEX IF NOT EXISTS idx_cache_key
            ON file_metadata(cache_key)
        ''')

        self.conn.commit()

    def _get_cache_key(self, file_path: Path) -> Optional[Tuple[float, int, str]]:
        """Generate cache key from file mtime, size and the config fingerprint.

        Returns:
            Tuple of (mtime, size, key) or None if the file doesn't exist
        """
        try:
            stat = file_path.stat()
        except OSError:
            return None
        mtime = stat.st_mtime
        size = stat.st_size
        return (mtime, size, f"{mtime}:{size}:{self.fingerprint}")

    def is_file_cached(self, file_path: Path) -> bool:
        """Check if the file's diagnostics are cached and still valid."""
        cache_key_data = self._get_cache_key(file_path)
        if not cache_key_data:
            return False

        cursor = self.conn.cursor()
        cursor.execute('''
            SELECT cache_key FROM file_metadata
            WHERE file_path = ?
        ''', (str(file_path),))

        result = cursor.fetchone()
        if not result:
            return False
        return result[0] == cache_key_data[2]

    def get_file_diagnostics(self, file_path: Path) -> Optional[List[Diagnostic]]:
        """Get cached diagnostics for a file.

        Returns:
            Diagnostics, or None if not cached or stale
        """
        if not self.is_file_cached(file_path):
            return None

        cursor = self.conn.cursor()
        cursor.execute('''
            SELECT diagnostics FROM file_results
            WHERE file_path = ?
        ''', (str(file_path),))

        result = cursor.fetchone()
        if result:
            try:
                return [Diagnostic.from_dict(d) for d in json.loads(result[0])]
            except (json.JSONDecodeError, TypeError):
                return None

        return None

    def set_file_diagnostics(self, file_path: Path, diagnostics: List[Diagnostic]):
        """Cache diagnostics for a file."""
        cache_key_data = self._get_cache_key(file_path)
        if not cache_key_data:
            return

        mtime, size, cache_key = cache_key_data

        cursor = self.conn.cursor()
        cursor.execute('''
            INSERT OR REPLACE INTO file_metadata (file_path, mtime, size, cache_key)
            VALUES (?, ?, ?, ?)
        ''', (str(file_path), mtime, size, cache_key))

        data = json.dumps([d.to_dict() for d in diagnostics])
        cursor.execute('''
            INSERT OR REPLACE INTO file_results (file_path, diagnostics, cache_key)
            VALUES (?, ?, ?)
        ''', (str(file_path), data, cache_key))

        self.conn.commit()

    def invalidate_file(self, file_path: Path):
        """Invalidate cache for a specific file."""
        cursor = self.conn.cursor()
        cursor.execute('DELETE FROM file_results WHERE file_path = ?', (str(file_path),))
        cursor.execute('DELETE FROM file_metadata WHERE file_path = ?', (str(file_path),))
        self.conn.commit()

    def clear_cache(self):
        """Clear all cached data."""
        cursor = self.conn.cursor()
        cursor.execute('DELETE FROM file_results')
        cursor.execute('DELETE FROM file_metadata')
        self.conn.commit()

    def get_cache_stats(self) -> Dict[str, int]:
        """Get cache statistics."""
        cursor = self.conn.cursor()
        cursor.execute('SELECT COUNT(*) FROM file_metadata')
        total_files = cursor.fetchone()[0]
        cursor.execute('SELECT diagnostics FROM file_results')
        rows = cursor.fetchall()

        diagnostics_cached = 0
        files_with_diagnostics = 0
        for (data,) in rows:
            try:
                count = len(json.loads(data))
            except json.JSONDecodeError:
                continue
            diagnostics_cached += count
            if count:
                files_with_diagnostics += 1

        return {
            'total_files': total_files,
            'files_with_diagnostics': files_with_diagnostics,
            'diagnostics_cached': diagnostics_cached,
        }

    def close(self):
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

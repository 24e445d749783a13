from pathlib import Path


def symlinks_supported(tmp_path: Path) -> bool:
    try:
        target = tmp_path / "symlink-probe-target"
        target.write_text("x")
        link = tmp_path / "symlink-probe-link"
        link.symlink_to(target)
        link.unlink()
        target.unlink()
        return True
    except (OSError, NotImplementedError):
        return False

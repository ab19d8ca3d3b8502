"""Blacktop estimator — sealcoating, crack filling, patching and striping estimates."""

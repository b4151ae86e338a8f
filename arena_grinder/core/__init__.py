"""Engine-agnostic plumbing: enums, errors, random sources and events."""

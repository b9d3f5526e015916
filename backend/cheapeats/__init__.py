"""CheapEats offline core: restaurant cache, deals, repeat protection and cheap-area hints."""

STORAGE_BACKEND = "memory"

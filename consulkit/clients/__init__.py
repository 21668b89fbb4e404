"""HTTP execution: request pipeline and the sync/async executors."""

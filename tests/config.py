from libb import Setting

Setting.unlock()

sqlite = Setting()
sqlite.drivername='sqlite'
sqlite.create_tables=True
sqlite.use_wal_mode=False
sqlite.quote_identifiers=True

Setting.lock()

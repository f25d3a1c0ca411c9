"""
SQL schema for the Supabase quota backend (QUOTA_BACKEND=supabase).
Run these queries in your Supabase SQL editor.
"""

CREATE_DEVICE_USAGE_TABLE = """
-- One row per device usage record; value holds {"date": ..., "count": ...}
CREATE TABLE IF NOT EXISTS device_daily_usage (
    key VARCHAR(255) PRIMARY KEY,
    value TEXT NOT NULL,
    created_at TIMESTAMPTZ DEFAULT NOW(),
    updated_at TIMESTAMPTZ DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_device_daily_usage_updated_at
    ON device_daily_usage(updated_at);

-- Enable Row Level Security
ALTER TABLE device_daily_usage ENABLE ROW LEVEL SECURITY;

-- Policy: Service role can do everything (for API)
CREATE POLICY device_daily_usage_service_role_all ON device_daily_usage
    FOR ALL
    USING (auth.role() = 'service_role');
"""

CREATE_UPDATED_AT_TRIGGER = """
-- Function to update updated_at timestamp
CREATE OR REPLACE FUNCTION update_updated_at_column()
RETURNS TRIGGER AS $$
BEGIN
    NEW.updated_at = NOW();
    RETURN NEW;
END;
$$ language 'plpgsql';

DROP TRIGGER IF EXISTS update_device_daily_usage_updated_at ON device_daily_usage;
CREATE TRIGGER update_device_daily_usage_updated_at
    BEFORE UPDATE ON device_daily_usage
    FOR EACH ROW
    EXECUTE FUNCTION update_updated_at_column();
"""

PURGE_STALE_USAGE = """
-- Optional housekeeping: records older than two days are never read again
DELETE FROM device_daily_usage WHERE updated_at < NOW() - INTERVAL '2 days';
"""

# Combined setup script
FULL_SCHEMA_SETUP = f"""
-- =====================================================
-- ProHeadshot Quota Schema Setup
-- =====================================================
-- Run this in your Supabase SQL Editor
-- =====================================================

{CREATE_DEVICE_USAGE_TABLE}

{CREATE_UPDATED_AT_TRIGGER}

-- =====================================================
-- Setup Complete!
-- =====================================================
"""

if __name__ == "__main__":
    print(FULL_SCHEMA_SETUP)

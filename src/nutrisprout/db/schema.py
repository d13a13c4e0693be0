"""SQLite database schema definitions."""

SCHEMA_SQL = """
-- Per-user metrics, goal overrides and selected program
CREATE TABLE IF NOT EXISTS user_profiles (
    user_id TEXT PRIMARY KEY,
    weight_kg REAL,
    height_cm REAL,
    age INTEGER,
    gender TEXT,
    activity_level TEXT,
    goal TEXT,
    target_calories INTEGER,
    daily_calories_target REAL,
    daily_protein_target REAL,
    daily_carbs_target REAL,
    daily_fat_target REAL,
    daily_water_target REAL,
    selected_program_id TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

-- Accumulated progress, stored as one JSON document per user
CREATE TABLE IF NOT EXISTS user_statistics (
    user_id TEXT PRIMARY KEY,
    statistics TEXT NOT NULL DEFAULT '{}',
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

-- Logged meals
CREATE TABLE IF NOT EXISTS meals (
    meal_id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    meal_date DATE NOT NULL,
    meal_time TEXT,
    meal_type TEXT NOT NULL,
    name TEXT NOT NULL,
    total_calories REAL NOT NULL DEFAULT 0,
    total_protein REAL DEFAULT 0,
    total_carbs REAL DEFAULT 0,
    total_fat REAL DEFAULT 0,
    notes TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_meals_user_date ON meals(user_id, meal_date);

-- Food items within a meal
CREATE TABLE IF NOT EXISTS food_items (
    item_id INTEGER PRIMARY KEY AUTOINCREMENT,
    meal_id INTEGER NOT NULL,
    name TEXT NOT NULL,
    quantity REAL,
    unit TEXT,
    calories REAL NOT NULL DEFAULT 0,
    protein REAL DEFAULT 0,
    carbs REAL DEFAULT 0,
    fat REAL DEFAULT 0,
    is_ai_generated BOOLEAN DEFAULT FALSE,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (meal_id) REFERENCES meals(meal_id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_food_items_meal ON food_items(meal_id);

-- Water intake (glasses) per day
CREATE TABLE IF NOT EXISTS water_log (
    user_id TEXT NOT NULL,
    log_date DATE NOT NULL,
    glasses REAL NOT NULL DEFAULT 0,
    PRIMARY KEY (user_id, log_date)
);
"""


def get_schema_sql() -> str:
    """Return the complete schema SQL."""
    return SCHEMA_SQL

"""Lua scripts backing the atomic primitives of ShortURLRedisDAO.

Redis runs a script without interleaving other commands, which makes each
check-and-set below indivisible for concurrent callers.

Every link is a hash at links:<shortcode> with the fields
target, created_at, hits and expires_at (epoch milliseconds, '' for never).
A mapping is live while expires_at is empty or greater than "now".
"""

# KEYS[1] link key, KEYS[2] target index key
# ARGV[1] target, ARGV[2] created_at ms, ARGV[3] expires_at ms or '', ARGV[4] now ms, ARGV[5] shortcode
INSERT_IF_ABSENT_LUA = r"""
if redis.call("EXISTS", KEYS[1]) == 1 then
  local expires_at = redis.call("HGET", KEYS[1], "expires_at")
  if not expires_at or expires_at == "" or tonumber(expires_at) > tonumber(ARGV[4]) then
    return 0
  end
  redis.call("DEL", KEYS[1])
end

redis.call("HSET", KEYS[1], "target", ARGV[1], "created_at", ARGV[2], "hits", 0, "expires_at", ARGV[3])
redis.call("SET", KEYS[2], ARGV[5])

if ARGV[3] ~= "" then
  redis.call("PEXPIREAT", KEYS[1], ARGV[3])
  redis.call("PEXPIREAT", KEYS[2], ARGV[3])
end

return 1
"""

# KEYS[1] link key
# ARGV[1] now ms
INCREMENT_HITS_LUA = r"""
if redis.call("EXISTS", KEYS[1]) == 0 then
  return 0
end

local expires_at = redis.call("HGET", KEYS[1], "expires_at")
if expires_at and expires_at ~= "" and tonumber(expires_at) <= tonumber(ARGV[1]) then
  return 0
end

redis.call("HINCRBY", KEYS[1], "hits", 1)
return 1
"""

# KEYS[1] link key
# ARGV[1] now ms
DELETE_IF_EXPIRED_LUA = r"""
local expires_at = redis.call("HGET", KEYS[1], "expires_at")
if expires_at and expires_at ~= "" and tonumber(expires_at) <= tonumber(ARGV[1]) then
  return redis.call("DEL", KEYS[1])
end
return 0
"""

# KEYS[1] link key, KEYS[2] target index key
# ARGV[1] shortcode
DELETE_LINK_LUA = r"""
local removed = redis.call("DEL", KEYS[1])
if redis.call("GET", KEYS[2]) == ARGV[1] then
  redis.call("DEL", KEYS[2])
end
return removed
"""

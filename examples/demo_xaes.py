"""
xaes256gcm — Live Demo
======================
Run:  python examples/demo_xaes.py

Encrypts and decrypts a real message with XAES-256-GCM in both call
shapes, checks the published test vector, and shows tamper detection.
"""

import sys, os, time
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from xaes256gcm import Xaes256GcmCipher, AuthenticationError

LINE = "═" * 70
MSG  = b"Random 192-bit nonces, no birthday bound worries."

def header(name):
    print(f"\n{LINE}")
    print(f"  {name}")
    print(LINE)

def ok(label, value=""):
    print(f"  ✓  {label}{f': {value}' if value else ''}")

# ─────────────────────────────────────────────────────────────────────────────
print(f"\n{LINE}")
print("  xaes256gcm — XAES-256-GCM Demo")
print(LINE)
print(f"  Message: {MSG.decode()}\n")

# ── KNOWN ANSWER ─────────────────────────────────────────────────────────────
header("KNOWN ANSWER — c2sp.org/XAES-256-GCM")
with Xaes256GcmCipher(bytes([0x03]) * 32) as x:
    ct = x.encrypt(b"XAES-256-GCM", b"ABCDEFGHIJKLMNOPQRSTUVWX", b"c2sp.org/XAES-256-GCM")
ok("Ciphertext", ct.hex())
ok("Matches vector", str(ct.hex() == "986ec1832593df5443a179437fd083bf3fdb41abd740a21f71eb769d"))

# ── ALLOCATING FORM ──────────────────────────────────────────────────────────
header("ALLOCATING — encrypt / decrypt")
key   = Xaes256GcmCipher.generate_key()
nonce = Xaes256GcmCipher.generate_nonce()
t0    = time.perf_counter()
with Xaes256GcmCipher(key) as x:
    ct = x.encrypt(MSG, nonce, b"demo")
    pt = x.decrypt(ct,  nonce, b"demo")
elapsed = time.perf_counter() - t0
ok("Key size",    "256 bits")
ok("Nonce size",  "192 bits")
ok("Output size", f"{len(ct)} bytes (data + tag=16)")
ok("Round-trip",  f"{elapsed*1000:.2f} ms")
ok("Decrypted",   pt.decode())

# ── BUFFER FORM ──────────────────────────────────────────────────────────────
header("BUFFER — encrypt_into / decrypt_into")
with Xaes256GcmCipher(key) as x:
    buf = bytearray(len(MSG) + Xaes256GcmCipher.OVERHEAD_ENCRYPTION)
    n   = x.encrypt_into(MSG, nonce, buf, b"demo")
    out = bytearray(n - Xaes256GcmCipher.TAG_SIZE)
    x.decrypt_into(bytes(buf), nonce, out, b"demo")
ok("Same as allocating", str(bytes(buf) == ct))
ok("Decrypted",          out.decode())

# ── BUNDLE ───────────────────────────────────────────────────────────────────
header("BUNDLE — seal / open")
with Xaes256GcmCipher(key) as x:
    bundle = x.seal(MSG)
    ok("Bundle size", f"{len(bundle)} bytes (nonce=24 + data + tag=16)")
    ok("Opened",      x.open(bundle).decode())

    # ── TAMPER ───────────────────────────────────────────────────────────────
    header("TAMPER — single bit flip")
    bad = bytearray(bundle)
    bad[30] ^= 0x01
    try:
        x.open(bytes(bad))
        print("  ✗  tamper NOT detected")
    except AuthenticationError as e:
        ok("Rejected", str(e))

print(f"\n{LINE}\n")

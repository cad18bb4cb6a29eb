"""
SnapPwd shares secrets through links that carry their own key.

Secrets are encrypted locally with AES-GCM. Only the ciphertext is uploaded;
the key is placed after the '#' in the share URL, which browsers and this
client never send to the server.

Share a text secret:

\b
    $ snappwd put "correct horse battery staple"
    URL: https://snappwd.io/g/sp-abc123#4vJ9...

Share a file:

\b
    $ snappwd put-file ./credentials.json --expiration 600

Check a secret's expiry without burning it:

\b
    $ snappwd peek "https://snappwd.io/g/sp-abc123"

Retrieve and decrypt a secret (this burns it):

\b
    $ snappwd get "https://snappwd.io/g/sp-abc123#4vJ9..."

Use a self-hosted server:

\b
    $ export SNAPPWD_API_URL="https://secrets.example.invalid/api/v1"
"""

__version__ = '1.3.0'

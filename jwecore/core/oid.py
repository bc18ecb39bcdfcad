"""ASN.1 object identifiers used by the RSAES key structures."""

from pyasn1.type import univ

# PKCS#1 (RFC 8017)
OID_RSA_ENCRYPTION = univ.ObjectIdentifier((1, 2, 840, 113549, 1, 1, 1))
OID_RSAES_OAEP = univ.ObjectIdentifier((1, 2, 840, 113549, 1, 1, 7))
OID_MGF1 = univ.ObjectIdentifier((1, 2, 840, 113549, 1, 1, 8))
OID_P_SPECIFIED = univ.ObjectIdentifier((1, 2, 840, 113549, 1, 1, 9))

# Hash functions
OID_SHA1 = univ.ObjectIdentifier((1, 3, 14, 3, 2, 26))
OID_SHA256 = univ.ObjectIdentifier((2, 16, 840, 1, 101, 3, 4, 2, 1))
OID_SHA384 = univ.ObjectIdentifier((2, 16, 840, 1, 101, 3, 4, 2, 2))
OID_SHA512 = univ.ObjectIdentifier((2, 16, 840, 1, 101, 3, 4, 2, 3))

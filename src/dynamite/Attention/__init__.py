from dynamite.Attention.attention_model import attention_model
